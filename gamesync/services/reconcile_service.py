"""Reconciliation: decide create, update, or nothing for each owned game.

The achievement summary costs one Steam request per game, so it is fetched only when
it can change the outcome: always for a new page, and for an existing page only when
its playtime differs from Steam's.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from gamesync.models import (
    PROP_ACHIEVEMENT,
    PROP_APPID,
    PROP_NAME,
    PROP_PLAY_TIME,
    AchievementSummary,
    CreateAction,
    PropertyValues,
    SyncAction,
    UpdateAction,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gamesync.models import DestinationRecord, SourceItem
    from gamesync.services.index_service import DestinationIndex

logger = logging.getLogger(__name__)

AchievementFetcher = Callable[[int], Awaitable[AchievementSummary]]


def build_initial_properties(item: SourceItem, summary: AchievementSummary) -> PropertyValues:
    """Full property set for a new page. Achievement is included only when known."""
    properties: PropertyValues = {
        PROP_APPID: item.appid,
        PROP_NAME: item.name,
        PROP_PLAY_TIME: item.playtime_forever,
    }
    if summary.is_known:
        properties[PROP_ACHIEVEMENT] = summary.value
    return properties


def stage_basic_changes(item: SourceItem, record: DestinationRecord) -> PropertyValues:
    """Title and playtime changes between a game and its page."""
    delta: PropertyValues = {}
    if record.title != item.name:
        delta[PROP_NAME] = item.name
    if record.play_time != item.playtime_forever:
        delta[PROP_PLAY_TIME] = item.playtime_forever
    return delta


def stage_achievement_change(
    delta: PropertyValues, record: DestinationRecord, summary: AchievementSummary
) -> None:
    """Add the achievement ratio to ``delta`` when known and different from the page.

    A page with no achievement value always differs from a known ratio, including 0.
    """
    if not summary.is_known:
        return
    if record.achievement != summary.value:
        delta[PROP_ACHIEVEMENT] = summary.value


async def reconcile_item(
    item: SourceItem,
    index: DestinationIndex,
    fetch_achievements: AchievementFetcher,
) -> SyncAction | None:
    """Decide the action for one game. Returns None when the page is up to date.

    Errors raised by ``fetch_achievements`` propagate to the caller.
    """
    record = index.get(item.appid)
    if record is None:
        summary = await fetch_achievements(item.appid)
        return CreateAction(
            item=item,
            achievement=summary,
            properties=build_initial_properties(item, summary),
        )

    delta = stage_basic_changes(item, record)
    if PROP_PLAY_TIME in delta:
        summary = await fetch_achievements(item.appid)
        stage_achievement_change(delta, record, summary)

    if not delta:
        logger.debug("No changes for %s (appid: %s)", item.name, item.appid)
        return None
    return UpdateAction(item=item, record=record, delta=delta)


async def reconcile(
    items: Iterable[SourceItem],
    index: DestinationIndex,
    fetch_achievements: AchievementFetcher,
) -> list[SyncAction]:
    """Decide actions for all games, one at a time, in iteration order.

    The first error aborts the whole pass. The sync driver does not use this; it
    calls reconcile_item per game itself so one game's failure is recorded and
    the remaining games still run.
    """
    actions: list[SyncAction] = []
    for item in items:
        action = await reconcile_item(item, index, fetch_achievements)
        if action is not None:
            actions.append(action)
    return actions
