"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │                        ┌─────────────────┐                          │
    │                        │   HTTPServer    │                          │
    │                        └────────┬────────┘                          │
    │                                 │                                   │
    │            ┌────────────────────┼────────────────────┐              │
    │            ▼                    ▼                    ▼              │
    │    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐         │
    │    │ SocketServer │    │  Connection  │    │    Router    │         │
    │    │ accept loop  │───►│ read / write │    │  snapshot    │         │
    │    └──────────────┘    └──────┬───────┘    └──────▲───────┘         │
    │                               │                   │                 │
    │                               ▼                   │                 │
    │                        dispatch.handle() ─────────┘                 │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Every connection is served to completion on the accept thread before the
next accept(). Handlers should therefore be quick.

=============================================================================
USAGE
=============================================================================

    server = HTTPServer(ServerConfig(port=8080))

    @server.get("/")
    def index(request, response):
        response.text("Hello, World!")

    server.listen()          # blocks until Ctrl+C / SIGTERM

or, configuring all routes at once:

    table = RouteTable()
    table.add(Method.GET, "/", index)
    HTTPServer().set_routes(table).listen(8080)

=============================================================================
"""

import logging
from typing import Callable, Mapping, Optional, Tuple, Union

from .config import ServerConfig
from .core.connection import Connection
from .core.socket_server import SocketServer
from .dispatch import handle
from .http.methods import Method
from .http.router import Handler, RouteTable, Router


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Single-threaded HTTP/1.x server: one request-line per connection.

    Routes can be added one at a time with the decorators, or replaced
    wholesale with set_routes(); either way a request in flight keeps
    seeing the table that was installed when it was routed.
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._router = Router()

    # =========================================================================
    # ROUTING
    # =========================================================================

    @property
    def router(self) -> Router:
        """The router used for every request."""
        return self._router

    def set_routes(self, routes: Union[RouteTable, Mapping]) -> "HTTPServer":
        """
        Replace the whole routing table.

        Returns:
            Self for method chaining.
        """
        self._router.install_new_configuration(routes)
        return self

    def route(self, path: str, method: Union[Method, str] = Method.GET) -> Callable[[Handler], Handler]:
        return self._router.route(path, method)

    def get(self, path: str) -> Callable[[Handler], Handler]:
        return self._router.get(path)

    def post(self, path: str) -> Callable[[Handler], Handler]:
        return self._router.post(path)

    def put(self, path: str) -> Callable[[Handler], Handler]:
        return self._router.put(path)

    def delete(self, path: str) -> Callable[[Handler], Handler]:
        return self._router.delete(path)

    def options(self, path: str) -> Callable[[Handler], Handler]:
        return self._router.options(path)

    def head(self, path: str) -> Callable[[Handler], Handler]:
        return self._router.head(path)

    def trace(self, path: str) -> Callable[[Handler], Handler]:
        return self._router.trace(path)

    def connect(self, path: str) -> Callable[[Handler], Handler]:
        return self._router.connect(path)

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port once listening with port 0."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    def listen(
        self,
        port: Optional[int] = None,
        callback: Optional[Callable[[], None]] = None,
    ) -> None:
        """
        Start serving (blocking).

        Args:
            port: Override the configured port.
            callback: Called once the socket is listening. Defaults to
                      logging "Server started".
        """
        if port is not None:
            self.config.port = port
            self.config.validate()

        self._setup_logging()

        if callback is None:
            callback = self._log_started

        logger.info(f"Starting HTTP server on {self.config.host}:{self.config.port}")
        for line in self._router.describe():
            logger.info(f"  route {line}")

        try:
            self._socket_server.start(self._handle_connection, on_started=callback)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self) -> None:
        """Stop accepting connections; listen() returns within a second."""
        self._socket_server.shutdown()

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_for_shutdown(timeout)

    def _log_started(self) -> None:
        host, port = self.address
        logger.info(f"Server started on http://{host}:{port}")

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("minihttp").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        conn.serve(self._dispatch)

    def _dispatch(self, raw: bytes, client_address: Tuple[str, int]) -> bytes:
        return handle(raw, self._router, client_address, self.config.server_name)


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """
    Create an HTTP server application.

    Example:
        app = create_app(ServerConfig(port=3000))

        @app.get("/")
        def index(request, response):
            response.text("Hello!")

        app.listen()
    """
    return HTTPServer(config)
