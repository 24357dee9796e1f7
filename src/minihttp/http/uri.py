"""
=============================================================================
REQUEST URI
=============================================================================

The request-target from the request-line, kept as an OPAQUE token:

    GET /search?q=hello%20world HTTP/1.1
        ───────────────────────
                 │
          URI("/search?q=hello%20world")

No decoding, no normalization:
    - percent-escapes stay escaped ("%20" is not turned into " ")
    - "/users/" and "/users" are different URIs
    - "/a/../b" is NOT collapsed to "/b"

str(uri) always gives back the exact token that was parsed, and that token
is what the router uses as the lookup key.

Valid tokens are one or more printable ASCII characters, "!" through "~".
Whitespace, control characters (NUL, DEL, ...) and raw non-ASCII bytes are
rejected; a client that wants them must percent-encode them.

=============================================================================
"""

from dataclasses import dataclass

from .errors import InvalidURIError


def _is_token_char(char: str) -> bool:
    return "!" <= char <= "~"


@dataclass(frozen=True)
class URI:
    """An opaque request-target (path plus optional query)."""

    value: str = "/"

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise InvalidURIError(repr(self.value), "must be a string")
        if not self.value:
            raise InvalidURIError(self.value, "must not be empty")
        for char in self.value:
            if not _is_token_char(char):
                raise InvalidURIError(
                    self.value, f"contains forbidden character {char!r}"
                )

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: str) -> "URI":
        """
        Construct a URI from a request-target token.

        Raises:
            InvalidURIError: If the token is empty or has characters outside
                             printable ASCII.
        """
        return cls(token)

    @property
    def path(self) -> str:
        """Everything before the first "?"."""
        return self.value.split("?", 1)[0]

    @property
    def query(self) -> str:
        """Everything after the first "?", or "" when there is none."""
        _, _, query = self.value.partition("?")
        return query
