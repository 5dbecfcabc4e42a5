"""Shared test fixtures for gamesync."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from gamesync.config import Settings
from gamesync.models import AchievementSummary, DestinationRecord, QueryPage, SourceItem

if TYPE_CHECKING:
    from gamesync.models import PropertyValues

TEST_DATABASE_ID = "db-123"


class FakeSteam:
    """In-memory game catalog recording achievement lookups."""

    def __init__(self) -> None:
        self.games: dict[int, SourceItem] = {}
        self.achievements: dict[int, AchievementSummary | Exception] = {}
        self.achievement_calls: list[int] = []
        self.list_error: Exception | None = None

    def add_game(self, appid: int, name: str, playtime: int) -> SourceItem:
        item = SourceItem(appid=appid, name=name, playtime_forever=playtime)
        self.games[appid] = item
        return item

    async def list_owned_games(self) -> dict[int, SourceItem]:
        if self.list_error is not None:
            raise self.list_error
        return dict(self.games)

    async def get_achievement_summary(self, appid: int) -> AchievementSummary:
        self.achievement_calls.append(appid)
        result = self.achievements.get(appid, AchievementSummary.unknown())
        if isinstance(result, Exception):
            raise result
        return result


class FakeNotion:
    """In-memory games database serving records in cursor-linked pages."""

    def __init__(self) -> None:
        self.pages: list[list[DestinationRecord]] = [[]]
        self.query_calls: list[tuple[str, str | None]] = []
        self.created: list[tuple[str, PropertyValues, str | None]] = []
        self.updated: list[tuple[str, PropertyValues]] = []
        self.create_errors: dict[int, Exception] = {}
        self.update_errors: dict[str, Exception] = {}
        self.query_error: Exception | None = None

    def set_records(self, *pages: list[DestinationRecord]) -> None:
        self.pages = [list(page) for page in pages] or [[]]

    async def query_database(
        self, database_id: str, start_cursor: str | None = None
    ) -> QueryPage:
        self.query_calls.append((database_id, start_cursor))
        if self.query_error is not None:
            raise self.query_error
        index = 0 if start_cursor is None else int(start_cursor.removeprefix("cursor-"))
        next_cursor = f"cursor-{index + 1}" if index + 1 < len(self.pages) else None
        return QueryPage(records=list(self.pages[index]), next_cursor=next_cursor)

    async def create_page(
        self,
        database_id: str,
        properties: PropertyValues,
        cover_url: str | None = None,
    ) -> DestinationRecord:
        appid = properties["appid"]
        if appid in self.create_errors:
            raise self.create_errors[appid]
        self.created.append((database_id, dict(properties), cover_url))
        return DestinationRecord(page_id=f"new-{appid}", appid=appid)

    async def update_page(self, page_id: str, properties: PropertyValues) -> DestinationRecord:
        if page_id in self.update_errors:
            raise self.update_errors[page_id]
        self.updated.append((page_id, dict(properties)))
        return DestinationRecord(page_id=page_id)


def make_record(
    appid: int | None,
    name: str | None,
    play_time: float | None = None,
    achievement: float | None = None,
    page_id: str | None = None,
) -> DestinationRecord:
    return DestinationRecord(
        page_id=page_id or f"page-{appid}",
        appid=appid,
        title=name,
        play_time=play_time,
        achievement=achievement,
    )


@pytest.fixture
def test_settings() -> Settings:
    """Settings with every required value present and no dotenv lookup."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        notion_api_key="secret_notion_key",
        notion_database_id=TEST_DATABASE_ID,
        steam_key="steam-key",
        steam_id="76561198000000000",
    )


@pytest.fixture
def fake_steam() -> FakeSteam:
    return FakeSteam()


@pytest.fixture
def fake_notion() -> FakeNotion:
    return FakeNotion()


@pytest.fixture
def record_factory():
    """Build DestinationRecord objects with decoded properties."""
    return make_record
