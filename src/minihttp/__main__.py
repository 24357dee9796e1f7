"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    python -m minihttp                      # 127.0.0.1:8080
    python -m minihttp --port 3000
    python -m minihttp --host 0.0.0.0 --log-level DEBUG

Environment variables (HTTP_HOST, HTTP_PORT, ...) provide the defaults;
command-line flags override them.

Demo routes:

    GET /       plain-text greeting
    GET /echo   the parsed request-line, re-serialized

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import LOG_LEVELS, ServerConfig
from .http.methods import Method
from .http.router import RouteTable
from .server import HTTPServer


def index(request, response):
    response.text(f"Hello from MiniHTTP {__version__}\n")


def echo(request, response):
    response.text(request.request_line.to_string())


def build_routes() -> RouteTable:
    """Routes installed by the command-line server."""
    table = RouteTable()
    table.add(Method.GET, "/", index)
    table.add(Method.GET, "/echo", echo)
    return table


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal single-threaded HTTP/1.x server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttp                      # Run with defaults
  python -m minihttp --port 3000          # Custom port
  python -m minihttp --host 0.0.0.0       # Listen on all interfaces
  python -m minihttp --read-size 4096     # Larger single read
        """
    )

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    parser.add_argument(
        "--read-size", "-r",
        type=int,
        default=defaults.read_size,
        help=f"Bytes read from each connection (default: {defaults.read_size})"
    )

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level.upper()})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"MiniHTTP {__version__}"
    )

    return parser


def main(argv=None):
    """Parse arguments, install the demo routes and run until interrupted."""
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: bad environment setting: {e}", file=sys.stderr)
        sys.exit(2)

    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        read_size=args.read_size,
        timeout=defaults.timeout,
        log_level=args.log_level,
    )

    try:
        server = HTTPServer(config).set_routes(build_routes())
        server.listen()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
