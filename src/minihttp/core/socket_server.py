"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

The listening socket and the accept loop.

    socket() ─► setsockopt() ─► bind() ─► listen() ─► on_started()
                                                          │
                    ┌─────────────────────────────────────┘
                    ▼
              ┌──────────┐  client   ┌────────────┐
              │ accept() │ ────────► │ Connection │ ──► connection_handler(conn)
              └──────────┘           └────────────┘            │
                    ▲                                          │
                    └──────────────────────────────────────────┘
                          (next accept only after the handler returns)

Connections are served one after another on the thread that called start().

=============================================================================
SHUTDOWN
=============================================================================

accept() has a 1 second timeout, so the loop wakes up regularly to check the
running flag. shutdown() clears the flag and the loop exits within a second.

SIGINT and SIGTERM call shutdown() as well, but Python only lets the main
thread install signal handlers. When start() runs on another thread (tests,
embedding) the handlers are left alone and the owner calls shutdown().

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle_connection(conn: Connection):
            conn.serve(dispatch)

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig):
        self.config = config

        # Created in start()
        self._socket: Optional[socket.socket] = None
        self._bound_address: Optional[Tuple[str, int]] = None

        self._running = False
        self._shutdown_event = threading.Event()
        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        The address the server is bound to.

        After start() has bound the socket this is the real address, which
        matters when the configured port is 0.
        """
        if self._bound_address is not None:
            return self._bound_address
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Rebind right after a restart instead of waiting out TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Responses are one small write; send it now
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # Lets the accept loop notice shutdown()
        sock.settimeout(1.0)

        return sock

    def _setup_signals(self):
        """Install SIGTERM/SIGINT handlers that call shutdown()."""
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread, leaving signal handlers alone")
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(
        self,
        connection_handler: Callable[[Connection], None],
        on_started: Optional[Callable[[], None]] = None,
    ):
        """
        Bind, listen and accept connections until shutdown() is called.

        Args:
            connection_handler: Called with each accepted Connection. The next
                                accept() happens only after it returns.
            on_started: Called once the socket is listening, before the first
                        accept(). Exceptions from it abort start().

        Raises:
            OSError: If the address cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._bound_address = self._socket.getsockname()[:2]

        self._running = True
        self._shutdown_event.clear()

        try:
            self._setup_signals()

            host, port = self.address
            logger.info(f"Server listening on {host}:{port}")

            if on_started is not None:
                on_started()

            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                # Closed under us, usually by shutdown()
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address[:2],
                read_size=self.config.read_size,
                timeout=self.config.timeout,
                server_name=self.config.server_name,
            )

            try:
                connection_handler(conn)
            except Exception as e:
                # keep accepting
                logger.exception(f"[{conn.id}] Connection error: {e}")
                conn.close()

    def shutdown(self):
        """
        Ask the accept loop to stop. Safe to call from any thread, and more
        than once.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._running = False
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._shutdown_event.set()
        logger.info("Socket server stopped")

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the server has stopped.

        Returns:
            True if shutdown completed, False on timeout.
        """
        return self._shutdown_event.wait(timeout)
