"""
=============================================================================
DISPATCH PIPELINE
=============================================================================

One request in, one response out. No sockets here: the transport layer hands
us the bytes it read and sends back whatever we return.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   raw bytes                                                         │
    │       │                                                             │
    │       ▼                                                             │
    │   parse_request() ──── RequestLineError ──► 400 {"error": ...}      │
    │       │                                                             │
    │       ▼                                                             │
    │   Response()            fresh 200, empty body                       │
    │       │                                                             │
    │       ▼                                                             │
    │   router.resolve(method, str(uri))   exact match, else not-found    │
    │       │                                                             │
    │       ▼                                                             │
    │   handler(request, response) ── raises ──► 500 {"error": ...}       │
    │       │                                                             │
    │       ▼                                                             │
    │   Connection: close, serialize ──► bytes                            │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

handle() never raises: every path ends in a serialized response, so the
connection always has something to write back.

=============================================================================
ACCESS LOG
=============================================================================

Each call emits one line on the "minihttp.access" logger:

    127.0.0.1 - "GET /hello HTTP/1.1" 200 12 0.41ms

Configure it separately from the rest of the package if needed:

    logging.getLogger("minihttp.access").setLevel(logging.WARNING)

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging
import time

from .http.errors import RequestLineError
from .http.request import Request, parse_request
from .http.response import DEFAULT_SERVER_NAME, Response, bad_request, internal_error
from .http.router import Router
from .http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)
access_logger = logging.getLogger("minihttp.access")


@dataclass
class AccessLogEntry:
    """What gets written to the access log for one request."""

    client_ip: str
    request_line: str
    status_code: int
    content_length: int
    duration_ms: float

    def to_text(self) -> str:
        return (
            f'{self.client_ip or "-"} - "{self.request_line}" '
            f"{self.status_code} {self.content_length} {self.duration_ms:.2f}ms"
        )


def handle(
    raw: bytes,
    router: Router,
    client_address: Tuple[str, int] = ("", 0),
    server_name: str = DEFAULT_SERVER_NAME,
) -> bytes:
    """
    Turn raw request bytes into serialized response bytes.

    Args:
        raw: Bytes read from the connection.
        router: Router holding the installed routing snapshot.
        client_address: Peer (ip, port), used for the Request and the log.
        server_name: Value for the Server header.

    Returns:
        The complete HTTP response, ready for sendall().
    """
    start_time = time.perf_counter()
    request: Optional[Request] = None

    # ─────────────────────────────────────────────────────────────────────
    # PARSE
    # ─────────────────────────────────────────────────────────────────────
    try:
        request = parse_request(raw, client_address)
    except RequestLineError as e:
        logger.warning(f"Rejected request from {client_address[0] or '-'}: {e}")
        response = bad_request(str(e))
    else:
        response = _run_handler(request, router)

    # ─────────────────────────────────────────────────────────────────────
    # SERIALIZE
    # ─────────────────────────────────────────────────────────────────────
    try:
        data = response.close_connection().to_bytes(server_name)
    except Exception as e:
        # a handler left a status, header or body we cannot put on the wire
        logger.exception(f"Could not serialize response: {e}")
        response = internal_error().close_connection()
        data = response.to_bytes(server_name)

    _log_access(request, client_address, response, start_time)
    return data


def _run_handler(request: Request, router: Router) -> Response:
    handler = router.resolve(request.method, request.path)
    response = Response()

    try:
        handler(request, response)
    except Exception as e:
        logger.exception(f"Handler error for {request.method} {request.path}: {e}")
        return internal_error()

    return response


def _log_access(
    request: Optional[Request],
    client_address: Tuple[str, int],
    response: Response,
    start_time: float,
) -> None:
    if request is not None:
        line = request.request_line.to_string().rstrip("\r\n")
    else:
        line = "-"

    status = HTTPStatus(response.status)
    entry = AccessLogEntry(
        client_ip=client_address[0],
        request_line=line,
        status_code=int(status),
        content_length=len(response.body_bytes),
        duration_ms=(time.perf_counter() - start_time) * 1000,
    )
    level = logging.WARNING if status.is_error else logging.INFO
    access_logger.log(level, entry.to_text())
