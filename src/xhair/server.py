"""
xhair Web Server Entry Point

Provides the `xhair-web` command to start the FastAPI server.

Usage:
    xhair-web                    # Start on $PORT, or 3500
    xhair-web --port 8000        # Start on custom port
    xhair-web --host 127.0.0.1   # Bind to localhost only
    xhair-web --reload           # Enable auto-reload for development
"""

import argparse
import logging
import sys

from xhair.core.config import get_config

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    config = get_config()
    parser = argparse.ArgumentParser(
        description="xhair - FACEIT crosshair lookup server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    xhair-web                     Start server on http://0.0.0.0:$PORT
    xhair-web --port 8000         Start on port 8000
    xhair-web --reload            Enable auto-reload (development)
        """,
    )
    parser.add_argument(
        "--host",
        default=config.service.host,
        help=f"Host to bind to (default: {config.service.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.service.port,
        help=f"Port to bind to (default: {config.service.port}, from PORT if set)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        default=config.logging.level.lower(),
        choices=["debug", "info", "warning", "error", "critical"],
        help="Log level (default: info)",
    )
    return parser


def main() -> None:
    """Start the xhair web server."""
    args = build_arg_parser().parse_args()

    try:
        import uvicorn
    except ImportError:
        logger.error("uvicorn not installed. Install with: pip install 'uvicorn[standard]'")
        sys.exit(1)

    logger.info("Starting xhair web server on http://%s:%s", args.host, args.port)

    uvicorn.run(
        "xhair.api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
