"""
=============================================================================
HTTP SERVER CLI ENTRY POINT
=============================================================================

    # Serve the current directory on localhost:8080
    python -m simplehttp

    # Custom port and directory
    python -m simplehttp --port 3000 --root ./public

    # Verbose logging (prints every parsed request)
    python -m simplehttp --log-level DEBUG

The same entry point is installed as the `simplehttp` console script.

=============================================================================
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .server import HTTPServer
from .config import ServerConfig, LOG_LEVELS


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="simplehttp",
        description="Minimal HTTP/1.0 file server built from scratch in Python",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m simplehttp                          # Serve . on 127.0.0.1:8080
  python -m simplehttp --port 3000              # Custom port
  python -m simplehttp --root ./public          # Serve another directory
  python -m simplehttp --log-level DEBUG        # Log every request
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: $HTTP_PORT or 8080)"
    )

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: $HTTP_HOST or 127.0.0.1)"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=None,
        help="Client socket timeout in seconds (default: $HTTP_TIMEOUT or none)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="The directory the server will serve files from (default: $HTTP_ROOT or .)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: $HTTP_LOG_LEVEL or INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"SimpleHttp {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """
    Translate parsed CLI arguments into a ServerConfig.

    Options left unset on the command line fall back to the environment
    (see ServerConfig.from_env), then to the built-in defaults.

    Raises:
        ValueError: If an HTTP_* environment variable is not a number
                    where one is expected.
    """
    overrides = {
        "host": args.host,
        "port": args.port,
        "root": args.root,
        "timeout": args.timeout,
        "log_level": args.log_level,
    }
    return replace(
        ServerConfig.from_env(),
        **{name: value for name, value in overrides.items() if value is not None},
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status: 0 after a clean shutdown, 1 if the address
        cannot be bound, 2 for invalid configuration.
    """
    args = build_parser().parse_args(argv)

    try:
        server = HTTPServer(config_from_args(args))
    except ValueError as e:
        print(f"simplehttp: error: {e}", file=sys.stderr)
        return 2

    try:
        server.run()
    except OSError as e:
        print(f"simplehttp: error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
