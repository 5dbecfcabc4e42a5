"""Command-line entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from gamesync.clients.notion import NotionClient
from gamesync.clients.steam import SteamClient
from gamesync.config import Settings
from gamesync.exceptions import ConfigurationError
from gamesync.services.sync_service import run_sync

if TYPE_CHECKING:
    from gamesync.models import SyncReport

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_ITEM_FAILURES = 2


def _configure_logging(debug: bool) -> None:
    """Configure application logging."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gamesync",
        description="Sync owned Steam games into a Notion database",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Dotenv file to load settings from (default: .env)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log planned creates and updates without writing to Notion",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help=f"Exit with status {EXIT_ITEM_FAILURES} if any game failed to sync",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def sync(settings: Settings, *, dry_run: bool = False) -> SyncReport:
    """Open both API clients and run one synchronization."""
    async with (
        SteamClient.from_settings(settings) as steam,
        NotionClient.from_settings(settings) as notion,
    ):
        return await run_sync(settings, steam, notion, dry_run=dry_run)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    args = parse_args(argv)
    settings = Settings(_env_file=args.env_file)  # type: ignore[call-arg]
    _configure_logging(args.debug or settings.debug)

    try:
        settings.validate_required()
    except ConfigurationError as exc:
        logger.error(
            "Missing required configuration. Please set the following environment variables: %s",
            ", ".join(exc.missing),
        )
        return EXIT_ERROR

    try:
        report = asyncio.run(sync(settings, dry_run=args.dry_run))
    except Exception:
        logger.exception("An unexpected error occurred during the synchronization process")
        return EXIT_ERROR

    if args.strict and report.has_failures:
        return EXIT_ITEM_FAILURES
    return EXIT_OK


def cli_entry() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry()
