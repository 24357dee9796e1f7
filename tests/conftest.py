"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Generator, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minihttp import HTTPServer, ServerConfig
from minihttp.http import Method, Request, Response, RouteTable


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request with headers after the request-line."""
    return (
        b"GET /api/users?page=1&limit=10 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a body (left unparsed)."""
    body = b'{"name": "John"}'
    return (
        b"POST /api/users HTTP/1.0\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
        + body
    )


@pytest.fixture
def config() -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        timeout=5.0,
        log_level="WARNING",
    )


def hello_handler(request: Request, response: Response) -> None:
    response.text("hello")


def boom_handler(request: Request, response: Response) -> None:
    raise RuntimeError("boom")


@pytest.fixture
def route_table() -> RouteTable:
    """Routes shared by the dispatch and server tests."""
    table = RouteTable()
    table.add(Method.GET, "/hello", hello_handler)
    table.add(Method.GET, "/boom", boom_handler)

    @table.post("/echo")
    def echo(request: Request, response: Response) -> None:
        response.set_body(request.request_line.to_string())

    return table


def send_raw(address, data: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes to the server and read until it closes."""
    with socket.create_connection(address, timeout=timeout) as sock:
        sock.sendall(data)
        chunks = []
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class ServerThread:
    """Runs an HTTPServer.listen() in a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._started = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def address(self):
        return self.server.address

    def start(self):
        self._thread = threading.Thread(
            target=self.server.listen,
            kwargs={"callback": self._started.set},
            daemon=True,
        )
        self._thread.start()

        if not self._started.wait(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, data: bytes) -> bytes:
        return send_raw(self.address, data)


@pytest.fixture
def live_server(config: ServerConfig, route_table: RouteTable) -> Generator[ServerThread, None, None]:
    """A started server on an ephemeral port with the shared routes."""
    server = HTTPServer(config).set_routes(route_table)

    thread = ServerThread(server)
    thread.start()

    yield thread

    thread.stop()
