"""Achievement completion ratio computation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from gamesync.models import AchievementSummary

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


def compute_achievement_summary(flags: Iterable[bool]) -> AchievementSummary:
    """Count achieved flags against the total. No flags yields an unknown summary."""
    achieved = 0
    total = 0
    for flag in flags:
        total += 1
        if flag:
            achieved += 1
    return AchievementSummary(achieved=achieved, total=total)


def summary_from_player_stats(appid: int, data: Any) -> AchievementSummary:
    """Build a summary from a GetPlayerAchievements response body.

    Only ``achieved == 1`` counts as achieved. A body without an achievements list is
    treated as "no stats" and yields an unknown summary.
    """
    player_stats = data.get("playerstats") if isinstance(data, dict) else None
    achievements = player_stats.get("achievements") if isinstance(player_stats, dict) else None
    if not isinstance(achievements, list):
        logger.warning("No achievements data found for app %s", appid)
        return AchievementSummary.unknown()
    return compute_achievement_summary(
        isinstance(entry, dict) and entry.get("achieved") == 1 for entry in achievements
    )
