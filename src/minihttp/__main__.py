"""
=============================================================================
COMMAND LINE INTERFACE
=============================================================================

    python -m minihttp [OPTIONS]
    minihttp [OPTIONS]                  # installed console script

Defaults come from the MINIHTTP_* environment variables (see
ServerConfig.from_env); flags override them.

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import LOG_FORMATS, LOG_LEVELS, ServerConfig
from .server import HTTPServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal HTTP/1.1 server with echo and file routes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttp                          # 127.0.0.1:4221, files from ./public
  python -m minihttp --directory /tmp/files   # serve another directory
  python -m minihttp --host 0.0.0.0 -p 8080   # all interfaces, port 8080
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )
    parser.add_argument(
        "--buffer-size",
        type=int,
        default=defaults.buffer_size,
        help=f"Bytes read per request (default: {defaults.buffer_size})",
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory", "-d",
        default=defaults.directory,
        help=f"Directory for /files/{{name}} (default: {defaults.directory})",
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help="Logging level (default: %(default)s)",
    )
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=defaults.log_format,
        help="Access log format (default: %(default)s)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}",
    )
    return parser


def parse_config(argv: Optional[List[str]] = None) -> ServerConfig:
    """Environment defaults overridden by command line flags."""
    defaults = ServerConfig.from_env()
    args = build_parser(defaults).parse_args(argv)
    return ServerConfig(
        host=args.host,
        port=args.port,
        backlog=defaults.backlog,
        buffer_size=args.buffer_size,
        timeout=defaults.timeout,
        shutdown_timeout=defaults.shutdown_timeout,
        directory=args.directory,
        log_level=args.log_level,
        log_format=args.log_format,
    )


def main(argv: Optional[List[str]] = None) -> int:
    try:
        # from_env() raises ValueError on non-numeric MINIHTTP_* values
        config = parse_config(argv)
        server = HTTPServer(config)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
