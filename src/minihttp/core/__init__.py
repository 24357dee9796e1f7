"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The socket plumbing underneath the HTTP layer.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                               │
    │  • Creates the TCP listening socket, binds, listens                 │
    │  • Runs the accept() loop on the calling thread                     │
    │  • Handles graceful shutdown via SIGTERM/SIGINT (main thread only)  │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ one Connection per accepted client
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                 │
    │  • ACCEPTED → READING → DISPATCHING → WRITING → CLOSED              │
    │  • Exactly one bounded recv() and at most one sendall()             │
    │  • Orderly TCP close                                                │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState, ConnectionStateError, Dispatcher

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
    "ConnectionStateError",
    "Dispatcher",
]
