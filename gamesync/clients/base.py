"""Protocols for the Steam and Notion collaborators of the sync driver."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from gamesync.models import (
        AchievementSummary,
        DestinationRecord,
        PropertyValues,
        QueryPage,
        SourceItem,
    )


@runtime_checkable
class GameCatalog(Protocol):
    """Source of owned games and their achievement completion."""

    async def list_owned_games(self) -> dict[int, SourceItem]:
        """Return owned games keyed by appid. Returns an empty dict on any failure."""
        ...

    async def get_achievement_summary(self, appid: int) -> AchievementSummary:
        """Return the achievement summary for one game; unknown when no stats exist."""
        ...


@runtime_checkable
class GameDatabase(Protocol):
    """Destination database of game pages. All operations raise on failure."""

    async def query_database(
        self, database_id: str, start_cursor: str | None = None
    ) -> QueryPage:
        """Return one page of database records."""
        ...

    async def create_page(
        self,
        database_id: str,
        properties: PropertyValues,
        cover_url: str | None = None,
    ) -> DestinationRecord:
        """Create a page with the given properties."""
        ...

    async def update_page(self, page_id: str, properties: PropertyValues) -> DestinationRecord:
        """Patch only the given properties of a page."""
        ...
