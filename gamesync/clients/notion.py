"""Notion API client for the games database."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from gamesync.exceptions import NotionAPIError
from gamesync.models import (
    PROP_ACHIEVEMENT,
    PROP_APPID,
    PROP_NAME,
    PROP_PLAY_TIME,
    DestinationRecord,
    PropertyValues,
    QueryPage,
)

if TYPE_CHECKING:
    from gamesync.config import Settings

logger = logging.getLogger(__name__)

NOTION_API = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"
QUERY_PAGE_SIZE = 100
_ERROR_BODY_LIMIT = 500

# Properties written as Notion "title"; everything else synced is a "number".
_TITLE_PROPERTIES = frozenset({PROP_NAME})


def encode_properties(values: PropertyValues) -> dict[str, Any]:
    """Convert plain property values to Notion property payloads."""
    encoded: dict[str, Any] = {}
    for name, value in values.items():
        if name in _TITLE_PROPERTIES:
            encoded[name] = {"title": [{"text": {"content": str(value)}}]}
        else:
            encoded[name] = {"number": value}
    return encoded


def _number_property(properties: dict[str, Any], name: str) -> int | float | None:
    prop = properties.get(name)
    if not isinstance(prop, dict):
        return None
    value = prop.get("number")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _title_property(properties: dict[str, Any], name: str) -> str | None:
    prop = properties.get(name)
    if not isinstance(prop, dict):
        return None
    segments = prop.get("title")
    if not isinstance(segments, list):
        return None
    parts: list[str] = []
    for segment in segments:
        if not isinstance(segment, dict):
            continue
        text = segment.get("plain_text")
        if text is None:
            text_obj = segment.get("text")
            text = text_obj.get("content", "") if isinstance(text_obj, dict) else ""
        parts.append(str(text))
    return "".join(parts)


def _appid_property(properties: dict[str, Any]) -> int | None:
    value = _number_property(properties, PROP_APPID)
    if value is None:
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        return int(value)
    return value


def decode_page(page: dict[str, Any]) -> DestinationRecord:
    """Decode a Notion page object into a DestinationRecord."""
    properties = page.get("properties")
    if not isinstance(properties, dict):
        properties = {}
    return DestinationRecord(
        page_id=str(page.get("id", "")),
        appid=_appid_property(properties),
        title=_title_property(properties, PROP_NAME),
        play_time=_number_property(properties, PROP_PLAY_TIME),
        achievement=_number_property(properties, PROP_ACHIEVEMENT),
        properties=properties,
    )


class NotionClient:
    """Client for the Notion REST API.

    Every operation raises ``NotionAPIError`` on a non-success status or an unreadable
    body, and lets httpx transport errors propagate.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = NOTION_API,
        notion_version: str = NOTION_VERSION,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {api_key}",
                "Notion-Version": notion_version,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> NotionClient:
        return cls(
            settings.notion_api_key,
            base_url=settings.notion_base_url,
            notion_version=settings.notion_version,
            timeout=settings.request_timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> NotionClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def _request(
        self, method: str, path: str, body: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Send a request and return the JSON body ({} for an empty response)."""
        resp = await self._client.request(method, path, json=body)
        if not resp.is_success:
            raise NotionAPIError(
                resp.status_code, resp.text[:_ERROR_BODY_LIMIT], method=method, path=path
            )
        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError as exc:
            msg = f"Invalid JSON body: {resp.text[:_ERROR_BODY_LIMIT]}"
            raise NotionAPIError(resp.status_code, msg, method=method, path=path) from exc
        if not isinstance(data, dict):
            msg = f"Unexpected response body type: {type(data).__name__}"
            raise NotionAPIError(resp.status_code, msg, method=method, path=path)
        return data

    async def query_database(
        self, database_id: str, start_cursor: str | None = None
    ) -> QueryPage:
        """Query one page of records from a database."""
        logger.debug("Querying Notion database %s (cursor: %s)", database_id, start_cursor)
        body: dict[str, Any] = {"page_size": QUERY_PAGE_SIZE}
        if start_cursor:
            body["start_cursor"] = start_cursor
        data = await self._request("POST", f"/databases/{database_id}/query", body)
        results = data.get("results")
        if not isinstance(results, list):
            msg = "Query response missing results list"
            raise NotionAPIError(200, msg, method="POST", path=f"/databases/{database_id}/query")
        records = [decode_page(page) for page in results if isinstance(page, dict)]
        next_cursor = data.get("next_cursor") if data.get("has_more", True) else None
        return QueryPage(records=records, next_cursor=next_cursor or None)

    async def create_page(
        self,
        database_id: str,
        properties: PropertyValues,
        cover_url: str | None = None,
    ) -> DestinationRecord:
        """Create a page in a database, optionally with an external cover image."""
        logger.debug("Creating Notion page in database %s", database_id)
        body: dict[str, Any] = {
            "parent": {"database_id": database_id},
            "properties": encode_properties(properties),
        }
        if cover_url:
            body["cover"] = {"external": {"url": cover_url}}
        return decode_page(await self._request("POST", "/pages", body))

    async def update_page(self, page_id: str, properties: PropertyValues) -> DestinationRecord:
        """Patch the given properties of a page, leaving all others untouched."""
        logger.debug("Updating Notion page %s", page_id)
        body = {"properties": encode_properties(properties)}
        return decode_page(await self._request("PATCH", f"/pages/{page_id}", body))
