"""
Tests for HTTPServer against a real socket on an ephemeral port.
"""

import json
import logging

import pytest

from minihttp import HTTPServer, ServerConfig, create_app
from minihttp.http import Method, RouteTable
from minihttp.__main__ import build_parser, build_routes

from conftest import ServerThread, send_raw


def status_of(response: bytes) -> int:
    return int(response.split(b" ", 2)[1])


class TestLiveServer:
    """Tests against a running server."""

    def test_binds_ephemeral_port(self, live_server: ServerThread):
        host, port = live_server.address
        assert host == "127.0.0.1"
        assert port != 0

    def test_routed_request(self, live_server: ServerThread):
        response = live_server.request(b"GET /hello HTTP/1.1\r\nHost: localhost\r\n\r\n")

        assert response.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"Connection: close\r\n" in response
        assert response.endswith(b"\r\n\r\nhello")

    def test_not_found(self, live_server: ServerThread):
        assert status_of(live_server.request(b"GET /nope HTTP/1.1\r\n\r\n")) == 404

    def test_malformed_request(self, live_server: ServerThread):
        response = live_server.request(b"HELLO THERE\r\n\r\n")
        assert status_of(response) == 400

    def test_handler_error(self, live_server: ServerThread):
        assert status_of(live_server.request(b"GET /boom HTTP/1.1\r\n\r\n")) == 500

    def test_serves_connections_in_sequence(self, live_server: ServerThread):
        for _ in range(5):
            assert status_of(live_server.request(b"GET /hello HTTP/1.1\r\n\r\n")) == 200

    def test_reconfigure_while_running(self, live_server: ServerThread):
        """Test that set_routes() takes effect for the next connection."""
        table = RouteTable()

        @table.get("/new")
        def new_route(request, response):
            response.text("new")

        live_server.server.set_routes(table)

        assert status_of(live_server.request(b"GET /hello HTTP/1.1\r\n\r\n")) == 404
        assert live_server.request(b"GET /new HTTP/1.1\r\n\r\n").endswith(b"new")

    def test_request_longer_than_read_size(self, config: ServerConfig):
        """Test that a request-line beyond the single read gets a 400."""
        config.read_size = 32
        server = HTTPServer(config)
        server.get("/" + "a" * 64)(lambda request, response: response.text("unreachable"))

        thread = ServerThread(server)
        thread.start()
        try:
            response = thread.request(b"GET /" + b"a" * 64 + b" HTTP/1.1\r\n\r\n")
        finally:
            thread.stop()

        assert status_of(response) == 400

    def test_shutdown_stops_listen(self, config: ServerConfig):
        server = HTTPServer(config)
        thread = ServerThread(server)
        thread.start()

        thread.stop()

        assert not server.is_running
        assert server.wait_for_shutdown(timeout=1.0)
        with pytest.raises(OSError):
            send_raw(server.address, b"GET / HTTP/1.1\r\n\r\n", timeout=1.0)


class TestHTTPServer:
    """Tests that do not need a socket."""

    def test_set_routes_returns_self(self, config: ServerConfig, route_table: RouteTable):
        server = HTTPServer(config)
        assert server.set_routes(route_table) is server
        assert server.router.lookup(Method.GET, "/hello") is not None

    def test_decorators(self, config: ServerConfig):
        server = create_app(config)

        for name in ("get", "post", "put", "delete", "options", "head", "trace", "connect"):
            getattr(server, name)("/x")(lambda request, response: None)

        assert len(server.router) == 8

    def test_route_decorator_with_method(self, config: ServerConfig):
        server = HTTPServer(config)

        @server.route("/items", method="PUT")
        def update(request, response):
            pass

        assert server.router.lookup(Method.PUT, "/items") is update

    def test_invalid_config_rejected(self):
        with pytest.raises(ValueError):
            HTTPServer(ServerConfig(port=70000))

    def test_default_callback_logs(self, config: ServerConfig, caplog):
        server = HTTPServer(config)

        with caplog.at_level(logging.INFO, logger="minihttp.server"):
            server._log_started()

        assert "Server started" in caplog.text


class TestCLI:
    """Tests for the command-line entry point pieces."""

    def test_parser(self):
        args = build_parser(ServerConfig()).parse_args(
            ["--port", "3000", "--read-size", "4096", "--log-level", "debug"]
        )
        assert args.port == 3000
        assert args.read_size == 4096
        assert args.log_level == "DEBUG"

    def test_demo_routes(self):
        table = build_routes()
        assert (Method.GET, "/") in table
        assert (Method.GET, "/echo") in table

    def test_echo_route(self, config: ServerConfig):
        server = HTTPServer(config).set_routes(build_routes())
        thread = ServerThread(server)
        thread.start()
        try:
            response = thread.request(b"GET /echo HTTP/1.0\r\n\r\n")
        finally:
            thread.stop()

        assert response.endswith(b"\r\n\r\nGET /echo HTTP/1.0\r\n")
