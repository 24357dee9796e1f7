"""
=============================================================================
PARSE ERRORS
=============================================================================

Every failure the request-line parser can report, as one exception family.

    HTTPParseError                      (status_code travels with the error)
     └── RequestLineError
          ├── TooShortError             input below the 15-byte minimum
          ├── NoLineEndingError         no LF anywhere in the buffer
          ├── MalformedRequestLineError line does not match the grammar
          ├── UnknownMethodError        token is not one of the 8 methods
          ├── InvalidURIError           request-target is not a valid token
          └── InvalidVersionError       major/minor out of range

All of them are recoverable: the dispatch pipeline catches RequestLineError
and answers 400 Bad Request. None of them should ever reach the socket loop.

=============================================================================
"""


class HTTPParseError(Exception):
    """
    Raised when HTTP request parsing fails.

    Carries the HTTP status code that should be returned to the client,
    so the caller can build an error response without a lookup table.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code  # HTTP status to return


class RequestLineError(HTTPParseError):
    """Base class for every request-line parse failure."""


class TooShortError(RequestLineError):
    """Input is shorter than the smallest valid request-line."""

    def __init__(self, length: int, minimum: int):
        super().__init__(f"Request too short: {length} bytes (minimum {minimum})")
        self.length = length
        self.minimum = minimum


class NoLineEndingError(RequestLineError):
    """Neither CRLF nor a bare LF was found in the input."""

    def __init__(self):
        super().__init__("Invalid line-ending: no LF found in request")


class MalformedRequestLineError(RequestLineError):
    """
    The request-line did not match the grammar.

    The offending line is kept on the exception (and echoed in the message)
    for diagnostics.
    """

    def __init__(self, line: str):
        super().__init__(f"Invalid request line: {line!r}")
        self.line = line


class UnknownMethodError(RequestLineError):
    """The method token is not part of the fixed method set."""

    def __init__(self, token: str):
        super().__init__(f"Unknown method: {token!r}")
        self.token = token


class InvalidURIError(RequestLineError):
    """The request-target could not be turned into a URI."""

    def __init__(self, token: str, reason: str = "invalid request-target"):
        super().__init__(f"Invalid URI {token!r}: {reason}")
        self.token = token


class InvalidVersionError(RequestLineError):
    """The HTTP version could not be parsed or does not fit an unsigned int."""

    def __init__(self, text: str, reason: str = "invalid HTTP version"):
        super().__init__(f"Invalid version {text!r}: {reason}")
        self.text = text
