"""
=============================================================================
REQUEST-LINE PARSER
=============================================================================

Turns the first line of a raw HTTP request into typed values.

    b"POST /a/b?x=1 HTTP/1.0\\nBODY"
      ─────────────────────── ─┬ ──┬─
                 │             │   │
           request-line   terminator  remainder (returned untouched)

=============================================================================
PARSING ALGORITHM
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │  1. Length check ─────────────── < 15 bytes?  → TooShortError       │
    │     │                                                               │
    │     ▼                                                               │
    │  2. Find first CRLF, else first LF ── none?   → NoLineEndingError   │
    │     │  terminator is CRLF (2 bytes) or LF (1 byte)                  │
    │     ▼                                                               │
    │  3. Grammar match ────────────── no match?    → MalformedRequest... │
    │     │                                                               │
    │     ▼                                                               │
    │  4. Method token → Method ────── unknown?     → UnknownMethodError  │
    │  5. URI token    → URI ───────── invalid?     → InvalidURIError     │
    │  6. Digits       → Version ───── overflow?    → InvalidVersionError │
    │     │                                                               │
    │     ▼                                                               │
    │  7. Return (RequestLine, bytes after the terminator)                │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Why 15? "GET / HTTP/1.1" is 14 characters, the shortest line the grammar
can match, and it needs at least one more byte for its LF.

Step 4 can never fail for input that passed step 3, because the grammar only
accepts the same eight tokens. It is still checked: the grammar and the
Method enum live in different modules and can drift apart.

Nothing is assigned until every step has succeeded, so a failed parse never
leaves a half-built RequestLine behind.

=============================================================================
INTERVIEW QUESTIONS ABOUT REQUEST-LINE PARSING
=============================================================================

Q: "Why accept a bare LF when RFC 7230 says CRLF?"
A: "RFC 7230 section 3.5 recommends that a recipient MAY recognize a single
   LF as a line terminator. Hand-typed requests (netcat, telnet on some
   systems) send bare LF, and being lenient here costs nothing."

Q: "Why not split on spaces instead of using a regex?"
A: "split() collapses runs of whitespace, so 'GET   /  HTTP/1.1' would be
   accepted. The grammar requires exactly one SP, and a full-line regex
   states that in one place."

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Tuple, Union

from .errors import (
    TooShortError,
    NoLineEndingError,
    MalformedRequestLineError,
)
from .grammar import match_request_line
from .methods import Method, method_from_str, method_to_str
from .uri import URI
from .version import Version


# "GET / HTTP/1.1" plus one byte of line ending
MIN_REQUEST_LENGTH = 15


@dataclass
class RequestLine:
    """
    The {Request-Line} of an HTTP request message.

    Defaults to "GET / HTTP/1.1". Fields are replaced through the setters
    (or plain assignment); the parser never mutates an existing instance,
    it builds a new one.

    Example:
        line = RequestLine()
        line.set_method(Method.POST)
        line.set_uri("/upload")
        line.to_string()   # "POST /upload HTTP/1.1\\r\\n"
    """

    method: Method = Method.GET
    uri: URI = field(default_factory=URI)
    version: Version = field(default_factory=Version)

    # =========================================================================
    # SETTERS
    # =========================================================================

    def set_method(self, method: Method) -> "RequestLine":
        """Replace the method."""
        self.method = method
        return self

    def set_uri(self, uri: Union[URI, str]) -> "RequestLine":
        """Replace the URI; a plain string is parsed first."""
        self.uri = uri if isinstance(uri, URI) else URI.parse(uri)
        return self

    def set_version(self, version: Version) -> "RequestLine":
        """Replace the version."""
        self.version = version
        return self

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_string(self) -> str:
        """
        Serialize back to wire form, CRLF included.

        parse_request_line(line.to_bytes())[0] == line for any line whose
        URI came from URI.parse().
        """
        return f"{method_to_str(self.method)} {self.uri} {self.version}\r\n"

    def to_bytes(self) -> bytes:
        return self.to_string().encode("ascii")

    def __str__(self) -> str:
        return self.to_string()

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    @classmethod
    def parse(cls, data: bytes) -> "RequestLine":
        """Parse raw bytes and return only the request-line."""
        request_line, _ = parse_request_line(data)
        return request_line


def _find_line_end(data: bytes) -> Tuple[int, int]:
    """
    Locate the end of the first line.

    Returns:
        (index of the terminator, terminator length)

    A CRLF anywhere in data wins over an earlier bare LF; a bare LF is only
    used when there is no CRLF at all.

    Raises:
        NoLineEndingError: If there is no LF in data.
    """
    index = data.find(b"\r\n")
    if index != -1:
        return index, 2

    index = data.find(b"\n")
    if index == -1:
        raise NoLineEndingError()
    return index, 1


def parse_request_line(data: bytes) -> Tuple[RequestLine, bytes]:
    """
    Parse the request-line at the start of a raw request.

    Args:
        data: Raw request bytes as read from the connection.

    Returns:
        (request_line, remainder) where remainder is every byte strictly
        after the consumed line terminator.

    Raises:
        TooShortError: Input shorter than MIN_REQUEST_LENGTH bytes.
        NoLineEndingError: No LF in the input.
        MalformedRequestLineError: The line does not match the grammar.
        UnknownMethodError: Method token not in the method set.
        InvalidURIError: The request-target is not a valid URI token.
        InvalidVersionError: Version numbers do not fit an unsigned int.
    """
    data = bytes(data)

    # ─────────────────────────────────────────────────────────────────────
    # STEP 1: Minimum length
    # ─────────────────────────────────────────────────────────────────────
    if len(data) < MIN_REQUEST_LENGTH:
        raise TooShortError(len(data), MIN_REQUEST_LENGTH)

    # ─────────────────────────────────────────────────────────────────────
    # STEP 2: Line ending
    # ─────────────────────────────────────────────────────────────────────
    line_end, terminator_length = _find_line_end(data)

    # latin-1 maps every byte to one code point, so decoding cannot fail
    # and non-ASCII bytes still reach the grammar (and get rejected there
    # or by URI).
    line = data[:line_end].decode("latin-1")

    # ─────────────────────────────────────────────────────────────────────
    # STEP 3: Grammar
    # ─────────────────────────────────────────────────────────────────────
    groups = match_request_line(line)
    if groups is None:
        raise MalformedRequestLineError(line)

    method_token, uri_token, major, minor = groups

    # ─────────────────────────────────────────────────────────────────────
    # STEPS 4-6: Build the values (any of these may raise)
    # ─────────────────────────────────────────────────────────────────────
    method = method_from_str(method_token)
    uri = URI.parse(uri_token)
    version = Version.from_digits(major, minor)

    # ─────────────────────────────────────────────────────────────────────
    # STEP 7: Hand back the line and whatever follows it
    # ─────────────────────────────────────────────────────────────────────
    remainder = data[line_end + terminator_length:]
    return RequestLine(method=method, uri=uri, version=version), remainder
