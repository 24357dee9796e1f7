"""
=============================================================================
HTTP METHODS
=============================================================================

The closed set of request methods the server understands.

    ┌──────────┬──────────────────────────────────────────────────────────┐
    │ Method   │ Meaning                                                  │
    ├──────────┼──────────────────────────────────────────────────────────┤
    │ GET      │ Retrieve a representation of the target                  │
    │ POST     │ Submit data to the target                                │
    │ PUT      │ Replace the target                                       │
    │ DELETE   │ Remove the target                                        │
    │ OPTIONS  │ Describe communication options (CORS preflight)          │
    │ HEAD     │ Like GET, headers only                                   │
    │ TRACE    │ Loop-back of the request message                         │
    │ CONNECT  │ Establish a tunnel (proxies)                             │
    └──────────┴──────────────────────────────────────────────────────────┘

Tokens are CASE-SENSITIVE: "get" is not a method. Unknown tokens are an
error, never silently mapped to a default.

Conversion is two pure functions:

    method_to_str(Method.GET)   → "GET"
    method_from_str("GET")      → Method.GET
    method_from_str("FETCH")    → UnknownMethodError

=============================================================================
"""

from enum import Enum

from .errors import UnknownMethodError


class Method(Enum):
    """
    HTTP request method.

    The enum value is the canonical wire token, so str(Method.GET) == "GET"
    and Method("GET") is Method.GET.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    TRACE = "TRACE"
    CONNECT = "CONNECT"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: str) -> "Method":
        """Same as method_from_str(), spelled as a constructor."""
        return method_from_str(token)


# Kept next to the enum so the grammar can be checked against it in tests.
METHOD_TOKENS = tuple(method.value for method in Method)


def method_to_str(method: Method) -> str:
    """Return the canonical uppercase token for a method."""
    return method.value


def method_from_str(token: str) -> Method:
    """
    Translate a wire token into a Method.

    Args:
        token: Method token exactly as received (case-sensitive).

    Returns:
        The matching Method.

    Raises:
        UnknownMethodError: If the token is not one of the eight methods.
    """
    try:
        return Method(token)
    except ValueError:
        raise UnknownMethodError(token) from None
