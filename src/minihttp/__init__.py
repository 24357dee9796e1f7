"""
=============================================================================
MINIHTTP - A Minimal HTTP/1.x Server On Raw Sockets
=============================================================================

Reads the request-line of each incoming request, routes it by exact
(method, request-target) match, and writes back whatever the handler put in
the response. One request per connection, one thread.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    minihttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m minihttp)
    ├── server.py            # HTTPServer: routes + listen()
    ├── dispatch.py          # bytes in → bytes out, never raises
    ├── config.py            # ServerConfig dataclass
    ├── core/
    │   ├── socket_server.py # Listening socket and accept loop
    │   └── connection.py    # Per-connection state machine
    └── http/
        ├── grammar.py       # Request-line regular grammar
        ├── methods.py       # Method enum
        ├── version.py       # Version(major, minor)
        ├── uri.py           # Opaque request-target
        ├── errors.py        # Parse error taxonomy
        ├── request_line.py  # Request-line parser
        ├── request.py       # Request
        ├── response.py      # Response builder
        ├── router.py        # RouteTable and Router
        └── status_codes.py  # HTTPStatus

=============================================================================
QUICK START
=============================================================================

    from minihttp import HTTPServer

    server = HTTPServer()

    @server.get("/")
    def index(request, response):
        response.text("Hello, World!")

    server.listen(8080)

=============================================================================
"""

__version__ = "1.0.0"
__author__ = "MiniHTTP Contributors"

from .server import HTTPServer, create_app
from .config import ServerConfig
from .http.methods import Method
from .http.request import Request
from .http.response import Response
from .http.router import RouteTable, Router

__all__ = [
    "HTTPServer",
    "create_app",
    "ServerConfig",
    "Method",
    "Request",
    "Response",
    "RouteTable",
    "Router",
    "__version__",
]
