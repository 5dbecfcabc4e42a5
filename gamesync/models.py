"""Domain types shared by the clients and the sync services."""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any

# Notion database property names (read/write contract).
PROP_NAME = "name"
PROP_APPID = "appid"
PROP_PLAY_TIME = "play_time"
PROP_ACHIEVEMENT = "achievement"

PropertyValues = dict[str, Any]
"""Property name -> plain value (str for the title, int/float for numbers)."""


@dataclass(frozen=True)
class SourceItem:
    """A game owned by the Steam account."""

    appid: int
    name: str
    playtime_forever: int = 0


@dataclass(frozen=True)
class AchievementSummary:
    """Achievement completion for one game.

    A summary with ``total == 0`` is *unknown*: the game defines no achievements or its
    stats are not available. Use ``is_known`` rather than comparing the ratio.
    """

    achieved: int = 0
    total: int = 0

    @classmethod
    def unknown(cls) -> AchievementSummary:
        return cls()

    @property
    def is_known(self) -> bool:
        return self.total > 0

    @property
    def ratio(self) -> Fraction | None:
        """Exact completion ratio in [0, 1], or None when unknown."""
        if not self.is_known:
            return None
        return Fraction(self.achieved, self.total)

    @property
    def value(self) -> float | None:
        """Completion ratio as the number written to Notion, or None when unknown."""
        ratio = self.ratio
        if ratio is None:
            return None
        return float(ratio)


@dataclass(frozen=True)
class DestinationRecord:
    """A Notion page in the games database, with the synced properties decoded."""

    page_id: str
    appid: int | None = None
    title: str | None = None
    play_time: int | float | None = None
    achievement: int | float | None = None
    properties: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class QueryPage:
    """One page of a paginated database query."""

    records: list[DestinationRecord]
    next_cursor: str | None = None


@dataclass(frozen=True)
class CreateAction:
    """Create a new page for a game that has no match in the database."""

    item: SourceItem
    achievement: AchievementSummary
    properties: PropertyValues


@dataclass(frozen=True)
class UpdateAction:
    """Patch the changed properties of an existing page."""

    item: SourceItem
    record: DestinationRecord
    delta: PropertyValues


SyncAction = CreateAction | UpdateAction


@dataclass
class SyncFailure:
    """A game whose sync raised an error."""

    appid: int
    name: str
    error: str


@dataclass
class SyncReport:
    """Outcome of one sync run."""

    dry_run: bool = False
    source_count: int = 0
    destination_count: int = 0
    created: list[int] = field(default_factory=list)
    updated: list[int] = field(default_factory=list)
    unchanged: list[int] = field(default_factory=list)
    failures: list[SyncFailure] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def summary(self) -> str:
        prefix = "Dry run" if self.dry_run else "Synchronization"
        return (
            f"{prefix} complete: {len(self.created)} created, {len(self.updated)} updated, "
            f"{len(self.unchanged)} unchanged, {len(self.failures)} failed."
        )
