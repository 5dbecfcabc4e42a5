"""Sync driver: fetch both sides, reconcile, and write changes one game at a time."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from gamesync.clients.steam import header_image_url
from gamesync.models import CreateAction, SyncFailure, SyncReport, UpdateAction
from gamesync.services.index_service import build_destination_index
from gamesync.services.reconcile_service import reconcile_item

if TYPE_CHECKING:
    from gamesync.clients.base import GameCatalog, GameDatabase
    from gamesync.config import Settings
    from gamesync.models import DestinationRecord, SyncAction

logger = logging.getLogger(__name__)


async def fetch_all_records(notion: GameDatabase, database_id: str) -> list[DestinationRecord]:
    """Read every record of the database, following the cursor until exhausted."""
    records: list[DestinationRecord] = []
    cursor: str | None = None
    while True:
        page = await notion.query_database(database_id, start_cursor=cursor)
        records.extend(page.records)
        if not page.next_cursor:
            return records
        cursor = page.next_cursor


async def apply_action(
    action: SyncAction,
    notion: GameDatabase,
    database_id: str,
    *,
    dry_run: bool = False,
) -> None:
    """Execute one create or update against the database."""
    item = action.item
    if isinstance(action, CreateAction):
        if dry_run:
            logger.info("Would add new game to Notion: %s %s", item.name, action.properties)
            return
        logger.info("Adding new game to Notion: %s", item.name)
        await notion.create_page(
            database_id, action.properties, cover_url=header_image_url(item.appid)
        )
    elif isinstance(action, UpdateAction):
        if dry_run:
            logger.info("Would update %s: %s", item.name, action.delta)
            return
        logger.info("Updating %s: %s", item.name, sorted(action.delta))
        await notion.update_page(action.record.page_id, action.delta)


async def run_sync(
    settings: Settings,
    steam: GameCatalog,
    notion: GameDatabase,
    *,
    dry_run: bool = False,
) -> SyncReport:
    """Run one full synchronization of the Steam library into the Notion database.

    Both initial reads run concurrently and a failure in either is fatal. After that,
    games are processed sequentially; an error while reconciling or writing one game is
    logged and recorded, and the run moves on to the next game.
    """
    logger.info("Starting Steam to Notion synchronization...")
    database_id = settings.notion_database_id
    steam_games, records = await asyncio.gather(
        steam.list_owned_games(),
        fetch_all_records(notion, database_id),
    )
    logger.info("Found %d games on Steam and %d pages in Notion.", len(steam_games), len(records))

    index = build_destination_index(records)
    report = SyncReport(
        dry_run=dry_run,
        source_count=len(steam_games),
        destination_count=len(records),
    )

    for item in steam_games.values():
        try:
            action = await reconcile_item(item, index, steam.get_achievement_summary)
            if action is not None:
                await apply_action(action, notion, database_id, dry_run=dry_run)
        except Exception as exc:
            logger.exception("Failed to sync page for %s (appid: %s)", item.name, item.appid)
            report.failures.append(SyncFailure(appid=item.appid, name=item.name, error=str(exc)))
            continue

        if action is None:
            report.unchanged.append(item.appid)
        elif isinstance(action, CreateAction):
            report.created.append(item.appid)
        else:
            report.updated.append(item.appid)

    logger.info(report.summary())
    return report
