"""Tests for the destination index builder."""

from __future__ import annotations

import logging

import pytest

from gamesync.models import DestinationRecord
from gamesync.services.index_service import build_destination_index


class TestBuildDestinationIndex:
    def test_keys_records_by_appid(self, record_factory) -> None:
        first = record_factory(10, "Game A", 120)
        second = record_factory(20, "Game B", 300)
        index = build_destination_index([first, second])
        assert index == {10: first, 20: second}

    def test_empty_sequence_builds_empty_index(self) -> None:
        assert build_destination_index([]) == {}

    def test_records_without_appid_are_skipped(self, record_factory) -> None:
        orphan = DestinationRecord(page_id="orphan", title="Untracked")
        kept = record_factory(30, "Game C", 5)
        index = build_destination_index([orphan, kept])
        assert list(index) == [30]
        assert index[30] is kept

    def test_duplicate_appid_last_record_wins(self, record_factory) -> None:
        older = record_factory(40, "Old", 1, page_id="page-old")
        newer = record_factory(40, "New", 2, page_id="page-new")
        index = build_destination_index([older, newer])
        assert index[40].page_id == "page-new"

        reversed_index = build_destination_index([newer, older])
        assert reversed_index[40].page_id == "page-old"

    def test_duplicate_appid_is_logged(
        self, record_factory, caplog: pytest.LogCaptureFixture
    ) -> None:
        records = [
            record_factory(50, "X", page_id="page-a"),
            record_factory(50, "X", page_id="page-b"),
        ]
        with caplog.at_level(logging.WARNING, logger="gamesync.services.index_service"):
            build_destination_index(records)
        assert "Duplicate appid 50" in caplog.text

    def test_accepts_any_iterable(self, record_factory) -> None:
        index = build_destination_index(record_factory(n, f"G{n}") for n in (1, 2, 3))
        assert sorted(index) == [1, 2, 3]
