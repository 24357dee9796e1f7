"""
=============================================================================
HTTP RESPONSE
=============================================================================

Handlers do not return a response; they FILL IN the one they are given:

    def hello(request, response):
        response.set_status(HTTPStatus.OK).text("Hello!")

The dispatch pipeline creates a default Response (200, empty body) for every
request, passes it to the handler, and serializes whatever the handler left
in it.

=============================================================================
SERIALIZATION FORMAT
=============================================================================

    HTTP/1.1 200 OK\\r\\n                    ← status line
    Content-Type: text/plain; charset=utf-8\\r\\n
    Content-Length: 6\\r\\n                  ← always computed from body
    Date: Sat, 17 Oct 2026 12:00:00 GMT\\r\\n ← added if missing
    Server: MiniHTTP/1.0\\r\\n               ← added if missing
    Connection: close\\r\\n                  ← set by the pipeline
    \\r\\n                                   ← blank line
    Hello!                                 ← body bytes

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Union
import json

from .status_codes import HTTPStatus


DEFAULT_SERVER_NAME = "MiniHTTP/1.0"


@dataclass
class Response:
    """
    Mutable HTTP response builder.

    Every mutator returns self, so calls chain:

        response.set_status(201).set_header("Location", "/items/1").json({"id": 1})
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        status = HTTPStatus(self.status)
        return f"{self.version} {int(status)} {status.phrase}"

    @property
    def body_bytes(self) -> bytes:
        """The body as bytes, even if a handler assigned a str to it."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return bytes(self.body)

    # =========================================================================
    # MUTATORS
    # =========================================================================

    def set_status(self, status: Union[HTTPStatus, int]) -> "Response":
        """
        Set the status code.

        Raises:
            ValueError: If an int is given that HTTPStatus does not know.
        """
        self.status = HTTPStatus(status)
        return self

    def set_header(self, name: str, value: str) -> "Response":
        if "\r" in name or "\n" in name or "\r" in value or "\n" in value:
            raise ValueError(f"Header {name!r} contains a line break")
        self.headers[name] = value
        return self

    def set_content_type(self, content_type: str) -> "Response":
        return self.set_header("Content-Type", content_type)

    def set_body(self, body: Union[str, bytes]) -> "Response":
        """Set the raw body; strings are encoded as UTF-8."""
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        else:
            self.body = bytes(body)
        return self

    def text(self, text: str, content_type: str = "text/plain; charset=utf-8") -> "Response":
        self.set_body(text)
        return self.set_content_type(content_type)

    def html(self, html: str) -> "Response":
        self.set_body(html)
        return self.set_content_type("text/html; charset=utf-8")

    def json(self, data: Any, pretty: bool = False) -> "Response":
        """Serialize data as the JSON body and set Content-Type."""
        indent = 2 if pretty else None
        self.body = json.dumps(data, indent=indent, ensure_ascii=False).encode("utf-8")
        return self.set_content_type("application/json; charset=utf-8")

    def close_connection(self) -> "Response":
        return self.set_header("Connection", "close")

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_bytes(self, server_name: str = DEFAULT_SERVER_NAME) -> bytes:
        """
        Serialize the response for socket.sendall().

        Content-Length always reflects the current body, even if a handler
        set the header by hand. Date and Server are only added when absent.

        Raises:
            ValueError: If status is not a known HTTPStatus, or a header
                cannot be encoded as latin-1.
            TypeError: If body cannot be converted to bytes.
        """
        response_headers = dict(self.headers)
        body = self.body_bytes
        response_headers["Content-Length"] = str(len(body))
        response_headers.setdefault("Date", format_http_date(datetime.now(timezone.utc)))
        response_headers.setdefault("Server", server_name)

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("latin-1") + b"\r\n"
        return header_bytes + body

    def to_string(self, server_name: str = DEFAULT_SERVER_NAME) -> str:
        """Text form of to_bytes(); the body is decoded as UTF-8."""
        return self.to_bytes(server_name).decode("utf-8", errors="replace")

    def __bytes__(self) -> bytes:
        return self.to_bytes()


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

_DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231), always in GMT.

    Example: Sat, 17 Oct 2026 12:00:00 GMT
    """
    dt = dt.astimezone(timezone.utc)
    return (
        f"{_DAYS[dt.weekday()]}, "
        f"{dt.day:02d} {_MONTHS[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# ERROR RESPONSES
# =============================================================================
#
# Used by the dispatch pipeline when there is no handler response to send:
# the request-line did not parse, or the handler blew up.
#
# =============================================================================

def error_response(status: HTTPStatus, message: str) -> Response:
    """A fresh Response with a JSON {"error": message} body."""
    return Response().set_status(status).json({"error": message})


def bad_request(message: str = "Bad Request") -> Response:
    return error_response(HTTPStatus.BAD_REQUEST, message)


def not_found(message: str = "Not Found") -> Response:
    return error_response(HTTPStatus.NOT_FOUND, message)


def internal_error(message: str = "Internal Server Error") -> Response:
    """500 response. Keep the message generic; details go to the log."""
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, message)


def request_timeout(message: str = "Request timeout") -> Response:
    return error_response(HTTPStatus.REQUEST_TIMEOUT, message)
