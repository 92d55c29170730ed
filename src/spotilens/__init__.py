"""spotilens - view your Spotify profile and listening through a PKCE login."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

__version__ = "0.1.0"

logger = logging.getLogger("spotilens")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="spotilens",
        description="Serve the spotilens page (Spotify login with PKCE).",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    parser.add_argument(
        "--port",
        type=int,
        default=5173,
        help="Port; must match SPOTIFY_REDIRECT_URI (default 5173)",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=Path(".env"),
        help="Environment file loaded before reading configuration",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Console entry point: load ``.env``, configure logging, run uvicorn."""
    import uvicorn
    from dotenv import load_dotenv

    from spotilens.config import SpotifyConfig
    from spotilens.servers.main import create_app
    from spotilens.utils.logging import setup_logging

    args = _parse_args(argv)
    if args.env_file.exists():
        load_dotenv(args.env_file, override=False)

    level: str | None = None
    if args.verbose == 1:
        level = "INFO"
    elif args.verbose >= 2:
        level = "DEBUG"
    setup_logging(level)

    config = SpotifyConfig.from_env()
    if not config.is_configured():
        logger.error("SPOTIFY_CLIENT_ID is not set; the page will only show the error.")
    logger.info("Serving spotilens on http://%s:%s", args.host, args.port)
    uvicorn.run(create_app(config), host=args.host, port=args.port, log_level=None)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
