"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunables in one dataclass. Three ways to build it:

    ServerConfig()                        # defaults
    ServerConfig(port=3000, read_size=4096)
    ServerConfig.from_env()               # HTTP_* environment variables

The server calls validate() before binding, so a bad value fails at startup
instead of on the first connection.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional

from .http.request_line import MIN_REQUEST_LENGTH
from .http.response import DEFAULT_SERVER_NAME


# One Ethernet frame of payload
DEFAULT_READ_SIZE = 1500

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    Development:
        ServerConfig(host="127.0.0.1", port=8080, log_level="DEBUG")

    Tests (let the OS pick a free port):
        ServerConfig(port=0)
    """

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces (containers)
    """

    port: int = 8080
    """
    The port number to listen on. 0 asks the OS for an ephemeral port;
    the bound port is then available from SocketServer.address.
    """

    backlog: int = 128
    """
    Maximum number of queued connections.
    When the accept queue is full, new connections are refused.
    """

    read_size: int = DEFAULT_READ_SIZE
    """
    Bytes requested by the single recv() on each connection.
    Whatever does not arrive in that one read is never seen; a request-line
    longer than this gets a 400.
    """

    timeout: Optional[float] = 30.0
    """
    Socket timeout in seconds for the client read and write.
    None = blocking (wait forever).
    """

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    server_name: str = DEFAULT_SERVER_NAME
    """
    Value of the Server response header.
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

            HTTP_HOST       Server host (default: 127.0.0.1)
            HTTP_PORT       Server port (default: 8080)
            HTTP_READ_SIZE  Bytes per connection read (default: 1500)
            HTTP_TIMEOUT    Socket timeout in seconds (default: 30)
            HTTP_LOG_LEVEL  Logging level (default: INFO)

        Usage:
            HTTP_PORT=3000 HTTP_LOG_LEVEL=DEBUG python -m minihttp
        """
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "8080")),
            read_size=int(os.getenv("HTTP_READ_SIZE", str(DEFAULT_READ_SIZE))),
            timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid setting.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        # a read smaller than the shortest request-line could never succeed
        if self.read_size < MIN_REQUEST_LENGTH:
            raise ValueError(f"read_size must be >= {MIN_REQUEST_LENGTH}")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level!r}")
