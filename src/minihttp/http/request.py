"""
=============================================================================
HTTP REQUEST
=============================================================================

The object handed to route handlers.

    Raw bytes                    Request                        Handler
    from socket  ──parse──►   request_line  ──route──►    handler(request,
        │                     remainder                          response)
        │                     client_address
    b"GET /..."

Only the request-line is parsed. Whatever follows it (headers, body) is
kept as raw bytes in `remainder` and never interpreted here; a handler that
cares can look at it, the router never does.

A Request is created fresh for every connection and thrown away once the
handler returns.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Tuple

from .methods import Method
from .request_line import RequestLine, parse_request_line
from .uri import URI
from .version import Version


@dataclass
class Request:
    """
    A parsed HTTP request.

    Attributes:
        request_line:   Method, URI and version from the first line.
        remainder:      Unparsed bytes after the request-line terminator.
        client_address: (ip, port) of the peer, ("", 0) when unknown.
        raw:            The original bytes, for logging and debugging.
    """

    request_line: RequestLine = field(default_factory=RequestLine)
    remainder: bytes = b""
    client_address: Tuple[str, int] = ("", 0)
    raw: bytes = field(default=b"", repr=False)

    @property
    def method(self) -> Method:
        return self.request_line.method

    @property
    def uri(self) -> URI:
        return self.request_line.uri

    @property
    def version(self) -> Version:
        return self.request_line.version

    @property
    def path(self) -> str:
        """The URI token exactly as received; this is the routing key."""
        return str(self.request_line.uri)

    @property
    def client_ip(self) -> str:
        return self.client_address[0]


def parse_request(data: bytes, client_address: Tuple[str, int] = ("", 0)) -> Request:
    """
    Parse raw request bytes into a Request.

    Args:
        data: Raw bytes from the connection.
        client_address: Peer's (ip, port) tuple.

    Returns:
        The parsed Request.

    Raises:
        RequestLineError: If the request-line is invalid (see errors.py).
    """
    request_line, remainder = parse_request_line(data)
    return Request(
        request_line=request_line,
        remainder=remainder,
        client_address=client_address,
        raw=bytes(data),
    )
