"""
=============================================================================
FILE SERVER CLI ENTRY POINT
=============================================================================

    # Serve the current directory on localhost:8080
    python -m fileserver

    # Serve ./public on all interfaces, port 3000
    python -m fileserver --root ./public --host 0.0.0.0 --port 3000

    # JSON access logs
    python -m fileserver --log-format json

Stop with Ctrl+C (SIGINT) or SIGTERM: both close the listening socket and
the server exits once the current request (if any) is done.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import LOG_LEVELS, ServerConfig
from .access_log import LOG_FORMATS
from .server import FileServer, setup_logging
from .storage import DirectoryFilesystem


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """Build the argument parser, with defaults taken from ``defaults``."""
    parser = argparse.ArgumentParser(
        prog="fileserver",
        description="Minimal HTTP/1.0 file server: one connection at a time, GET only",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fileserver                          # Serve . on 127.0.0.1:8080
  python -m fileserver --root ./public          # Serve a directory
  python -m fileserver --host 0.0.0.0 -p 3000   # All interfaces, port 3000
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
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
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=defaults.root_dir,
        help=f"Directory to serve files from (default: {defaults.root_dir})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=defaults.log_level,
        help=f"Logging level (default: {defaults.log_level})"
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
        version=f"fileserver {__version__}"
    )

    return parser


def main(argv=None) -> int:
    """
    Main CLI entry point.

    Environment variables (see ServerConfig.from_env) provide the defaults;
    command-line flags override them.

    Returns:
        Process exit status.
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment: {e}", file=sys.stderr)
        return 1

    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        backlog=defaults.backlog,
        root_dir=args.root,
        log_level=args.log_level,
        log_format=args.log_format,
    )

    try:
        config.validate()
        setup_logging(config)

        resolver = DirectoryFilesystem(config.root_dir, index_file=config.index_file)
        server = FileServer(config)
        server.serve(resolver)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
