"""
=============================================================================
COMMAND LINE ENTRY POINT
=============================================================================

    python -m tinyhttpd [--directory DIR] [--host HOST] [--port PORT]
                        [--log-level LEVEL] [--log-format text|json]

    tinyhttpd --directory /tmp/data          (installed console script)

Defaults come from the environment (see ServerConfig.from_env) and then
from ServerConfig itself.

Exit status:
    0   clean shutdown (SIGINT / SIGTERM)
    1   setup failure: directory cannot be created, address cannot be bound
    2   invalid arguments or configuration

=============================================================================
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import ServerConfig, LOG_FORMATS
from .errors import SetupError
from .server import HTTPServer


logger = logging.getLogger("tinyhttpd")


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinyhttpd",
        description="Minimal HTTP/1.1 server with echo, user-agent and file routes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tinyhttpd                                 # 0.0.0.0:4221, files in .
  tinyhttpd --directory /tmp/data           # Files under /tmp/data
  tinyhttpd --port 8080 --log-level DEBUG   # Custom port, verbose
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILE STORE
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory", "-d",
        default=defaults.directory,
        help=f"Directory behind /files/, created if missing (default: {defaults.directory})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

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

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level.upper()})"
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=defaults.log_format,
        help=f"Access log format (default: {defaults.log_format})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"tinyhttpd {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, prepare the file store directory and run the server.

    Returns:
        Process exit status.
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"tinyhttpd: invalid environment: {e}", file=sys.stderr)
        return 2

    parser = build_parser(defaults)
    args = parser.parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        directory=args.directory,
        backlog=defaults.backlog,
        buffer_size=defaults.buffer_size,
        log_level=args.log_level,
        log_format=args.log_format,
    )

    try:
        server = HTTPServer(config)
    except ValueError as e:
        parser.error(str(e))

    try:
        config.prepare_directory()
        server.run()
    except SetupError as e:
        logging.basicConfig(format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        logger.error(f"Setup failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
