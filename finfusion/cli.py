"""
CLI entry point for the FinFusion core.

Usage:
    # Serve the local HTTP surface
    python -m finfusion.cli serve --port 8000

    # Bind to all interfaces
    python -m finfusion.cli serve --host 0.0.0.0
"""

import argparse
import logging

from finfusion.core.config import settings
from finfusion.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI application under uvicorn."""
    import uvicorn

    logger.info("Starting %s at http://%s:%d", settings.project_name, args.host, args.port)
    logger.info("Backend: %s", settings.backend_base_url)
    uvicorn.run("finfusion.main:app", host=args.host, port=args.port, reload=args.reload)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="FinFusion client core CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Serve the local HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")
    serve_parser.add_argument(
        "--reload", action="store_true", help="Reload on code changes (development)"
    )
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> None:
    configure_logging(level=settings.log_level)
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
