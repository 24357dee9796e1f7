"""
=============================================================================
CONNECTION LIFECYCLE
=============================================================================

One accepted socket, one request, one response, then close. No keep-alive.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL
=============================================================================

recv() returns whatever has arrived so far, which is not necessarily the
whole request. This server makes exactly ONE bounded read:

    data = sock.recv(read_size)       # read_size defaults to 1500 (MTU)

Only the request-line is ever parsed, and for real clients it arrives in the
first segment. If it does not (a client typing slowly into netcat, a
request-line longer than read_size) the parser sees no line ending and the
client gets a 400. That is the price of never buffering.

=============================================================================
STATE MACHINE
=============================================================================

    ACCEPTED ──► READING ──► DISPATCHING ──► WRITING ──► CLOSED
                    │                           ▲
                    └──── timeout (408) ────────┘

    Any state may go straight to CLOSED (peer reset, empty read, errors).
    Anything else raises ConnectionStateError, which is also what stops a
    second read or a second write on the same connection.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Tuple
import uuid

from ..http.response import DEFAULT_SERVER_NAME, request_timeout


logger = logging.getLogger(__name__)


# dispatch(raw_bytes, client_address) -> response bytes
Dispatcher = Callable[[bytes, Tuple[str, int]], bytes]


class ConnectionState(Enum):
    """Connection lifecycle states."""
    ACCEPTED = "accepted"        # Just accepted, nothing read yet
    READING = "reading"          # Inside the single recv()
    DISPATCHING = "dispatching"  # Parsing, routing, running the handler
    WRITING = "writing"          # Inside the single sendall()
    CLOSED = "closed"            # Socket released


_TRANSITIONS: Dict[ConnectionState, FrozenSet[ConnectionState]] = {
    ConnectionState.ACCEPTED: frozenset({ConnectionState.READING, ConnectionState.CLOSED}),
    ConnectionState.READING: frozenset({
        ConnectionState.DISPATCHING,
        ConnectionState.WRITING,
        ConnectionState.CLOSED,
    }),
    ConnectionState.DISPATCHING: frozenset({ConnectionState.WRITING, ConnectionState.CLOSED}),
    ConnectionState.WRITING: frozenset({ConnectionState.CLOSED}),
    ConnectionState.CLOSED: frozenset(),
}


class ConnectionStateError(RuntimeError):
    """An operation was attempted in a state that does not allow it."""

    def __init__(self, current: ConnectionState, target: ConnectionState):
        super().__init__(f"Illegal connection transition: {current.name} -> {target.name}")
        self.current = current
        self.target = target


@dataclass
class Connection:
    """
    Represents a single client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used as a log prefix.
        state: Current lifecycle state; change it with transition().
        created_at: Timestamp when the connection was accepted.
        read_size: Upper bound for the one recv() call.
        timeout: Socket timeout for the read and the write.
        server_name: Server header for the 408 reply.
    """

    socket: socket.socket
    address: Tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.ACCEPTED
    created_at: float = field(default_factory=time.time)

    read_size: int = 1500
    timeout: float = 30.0
    server_name: str = DEFAULT_SERVER_NAME

    bytes_read: int = field(default=0, repr=False)
    bytes_written: int = field(default=0, repr=False)

    def __post_init__(self):
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0] if self.address else ""

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    @property
    def is_closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    def can_transition(self, target: ConnectionState) -> bool:
        return target in _TRANSITIONS[self.state]

    def transition(self, target: ConnectionState) -> None:
        """
        Move to `target`.

        Raises:
            ConnectionStateError: If the edge is not in the state machine.
        """
        if not self.can_transition(target):
            raise ConnectionStateError(self.state, target)
        logger.debug(f"[{self.id}] {self.state.name} -> {target.name}")
        self.state = target

    # =========================================================================
    # I/O
    # =========================================================================

    def read_once(self) -> bytes:
        """
        Perform the connection's only read.

        Returns:
            Up to read_size bytes; b"" if the client closed without sending.

        Raises:
            ConnectionStateError: If called twice or after close.
            socket.timeout: If nothing arrived within the timeout.
            OSError: On connection reset and other socket errors.
        """
        self.transition(ConnectionState.READING)
        data = self.socket.recv(self.read_size)
        self.bytes_read = len(data)
        return data

    def send_response(self, data: bytes) -> bool:
        """
        Perform the connection's only write.

        Uses sendall() so the whole response goes out or an error is raised.

        Returns:
            True if send succeeded, False if the connection was lost.
        """
        self.transition(ConnectionState.WRITING)

        try:
            self.socket.sendall(data)
            self.bytes_written = len(data)
            return True
        except (ConnectionResetError, BrokenPipeError, OSError) as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    def close(self):
        """
        Close the connection gracefully.

        shutdown(SHUT_WR) sends our FIN, draining picks up anything the client
        sent after the one read, then close() releases the descriptor.
        Safe to call more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # peer already gone

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except (socket.timeout, OSError):
            pass

        try:
            self.socket.close()
        except OSError:
            pass

        self.transition(ConnectionState.CLOSED)
        logger.debug(
            f"[{self.id}] Connection closed ({self.bytes_read} bytes in, "
            f"{self.bytes_written} bytes out)"
        )

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def serve(self, dispatch: Dispatcher) -> None:
        """
        Run the full lifecycle: read, dispatch, write, close.

        Never raises for client misbehaviour; a timeout gets a 408, a reset or
        an empty read just closes the socket.
        """
        with self:
            try:
                raw = self.read_once()
            except socket.timeout:
                logger.warning(f"[{self.id}] Read timed out after {self.timeout}s")
                reply = request_timeout().close_connection()
                self.send_response(reply.to_bytes(self.server_name))
                return
            except OSError as e:
                logger.warning(f"[{self.id}] Read failed: {e}")
                return

            if not raw:
                logger.debug(f"[{self.id}] Client closed without sending data")
                return

            self.transition(ConnectionState.DISPATCHING)
            response_bytes = dispatch(raw, self.address)
            self.send_response(response_bytes)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
