"""Destination index: Notion pages keyed by Steam appid."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gamesync.models import DestinationRecord

logger = logging.getLogger(__name__)

DestinationIndex = dict[int, "DestinationRecord"]


def build_destination_index(records: Iterable[DestinationRecord]) -> DestinationIndex:
    """Map each record's appid to the record.

    Records without an appid cannot match a game and are skipped. When several records
    share an appid, the last one in sequence order wins.
    """
    index: DestinationIndex = {}
    for record in records:
        if record.appid is None:
            logger.debug("Skipping page %s without appid", record.page_id)
            continue
        previous = index.get(record.appid)
        if previous is not None:
            logger.warning(
                "Duplicate appid %s in pages %s and %s; using %s",
                record.appid,
                previous.page_id,
                record.page_id,
                record.page_id,
            )
        index[record.appid] = record
    return index
