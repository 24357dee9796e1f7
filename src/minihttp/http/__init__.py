"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Everything between raw bytes and a handler call:

    b"GET /hello HTTP/1.1\\r\\n..."
         │
         ▼
    grammar.py        METHOD SP request-target SP HTTP/d.d, nothing else
         │
         ▼
    request_line.py   length check, line ending, typed values
         │            (methods.py, uri.py, version.py, errors.py)
         ▼
    request.py        Request = RequestLine + opaque remainder
         │
         ▼
    router.py         exact (Method, path) lookup in an immutable snapshot
         │
         ▼
    response.py       handler fills in a Response, we serialize it

Nothing here touches a socket; see minihttp.core for that.

=============================================================================
"""

from .errors import (
    HTTPParseError,
    RequestLineError,
    TooShortError,
    NoLineEndingError,
    MalformedRequestLineError,
    UnknownMethodError,
    InvalidURIError,
    InvalidVersionError,
)
from .grammar import REQUEST_LINE_PATTERN, match_request_line
from .methods import Method, METHOD_TOKENS, method_from_str, method_to_str
from .version import Version, HTTP_1_0, HTTP_1_1
from .uri import URI
from .request_line import MIN_REQUEST_LENGTH, RequestLine, parse_request_line
from .request import Request, parse_request
from .response import (
    Response,
    format_http_date,
    error_response,
    bad_request,
    not_found,
    internal_error,
    request_timeout,
)
from .router import Handler, RouteTable, Router, default_not_found
from .status_codes import HTTPStatus


__all__ = [
    # Errors
    "HTTPParseError",
    "RequestLineError",
    "TooShortError",
    "NoLineEndingError",
    "MalformedRequestLineError",
    "UnknownMethodError",
    "InvalidURIError",
    "InvalidVersionError",

    # Grammar and values
    "REQUEST_LINE_PATTERN",
    "match_request_line",
    "Method",
    "METHOD_TOKENS",
    "method_from_str",
    "method_to_str",
    "Version",
    "HTTP_1_0",
    "HTTP_1_1",
    "URI",

    # Request
    "MIN_REQUEST_LENGTH",
    "RequestLine",
    "parse_request_line",
    "Request",
    "parse_request",

    # Response
    "Response",
    "format_http_date",
    "error_response",
    "bad_request",
    "not_found",
    "internal_error",
    "request_timeout",

    # Routing
    "Handler",
    "RouteTable",
    "Router",
    "default_not_found",

    # Status codes
    "HTTPStatus",
]
