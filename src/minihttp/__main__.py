"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    # Defaults: 127.0.0.1:4221, no served directory
    python -m minihttp

    # Serve /files/ from a directory
    python -m minihttp --directory /tmp/data

    # Listen on all interfaces, verbose logs
    python -m minihttp --host 0.0.0.0 --log-level DEBUG

Flags override the HTTP_* environment variables read by
ServerConfig.from_env(), which override the built-in defaults.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .app import create_app
from .config import LOG_LEVELS, ServerConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal HTTP/1.1 server with echo and file endpoints",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttp                          # Run with defaults
  python -m minihttp --directory /tmp/data    # Enable /files/ routes
  python -m minihttp --port 8080              # Custom port
        """
    )

    parser.add_argument(
        "--directory", "-d",
        default=None,
        help="Directory served by the /files/ routes (default: none, file routes 404)"
    )

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 127.0.0.1)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 4221)"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=None,
        help="Per-connection socket timeout in seconds (default: none)"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}"
    )

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = ServerConfig.from_env().with_overrides(
            directory=args.directory,
            host=args.host,
            port=args.port,
            timeout=args.timeout,
            log_level=args.log_level,
        )
        server = create_app(config)
        server.run()
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
