"""Steam Web API client: owned games and per-game achievements."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gamesync.models import AchievementSummary, SourceItem
from gamesync.services.achievement_service import summary_from_player_stats

if TYPE_CHECKING:
    from gamesync.config import Settings

logger = logging.getLogger(__name__)

STEAM_API = "https://api.steampowered.com"
OWNED_GAMES_PATH = "/IPlayerService/GetOwnedGames/v0001/"
PLAYER_ACHIEVEMENTS_PATH = "/ISteamUserStats/GetPlayerAchievements/v1/"
HEADER_IMAGE_URL = "https://cdn.akamai.steamstatic.com/steam/apps/{appid}/header.jpg"


def header_image_url(appid: int) -> str:
    """Public header image of a game on the Steam CDN."""
    return HEADER_IMAGE_URL.format(appid=appid)


class OwnedGame(BaseModel):
    """One entry of ``response.games`` in a GetOwnedGames response."""

    model_config = ConfigDict(extra="ignore")

    appid: int = Field(gt=0)
    name: str = ""
    playtime_forever: int = Field(default=0, ge=0)

    def to_source_item(self) -> SourceItem:
        return SourceItem(appid=self.appid, name=self.name, playtime_forever=self.playtime_forever)


class SteamClient:
    """Client for the Steam Web API.

    Neither operation raises: the owned games list degrades to empty and an
    achievement summary degrades to unknown, so one game's missing stats never block
    its playtime or title update.
    """

    def __init__(
        self,
        steam_key: str,
        steam_id: str,
        *,
        base_url: str = STEAM_API,
        language: str = "schinese",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._steam_key = steam_key
        self._steam_id = steam_id
        self._language = language
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> SteamClient:
        return cls(
            settings.steam_key,
            settings.steam_id,
            base_url=settings.steam_base_url,
            language=settings.steam_language,
            timeout=settings.request_timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> SteamClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def list_owned_games(self) -> dict[int, SourceItem]:
        """Fetch all games owned by the account, keyed by appid."""
        params = {
            "key": self._steam_key,
            "steamid": self._steam_id,
            "format": "json",
            "include_appinfo": "true",
            "language": self._language,
            "include_extended_appinfo": "true",
            "include_free_sub": "true",
        }
        try:
            resp = await self._client.get(OWNED_GAMES_PATH, params=params)
            if resp.status_code != 200:
                logger.error("Error fetching owned games from Steam: HTTP %s", resp.status_code)
                return {}
            data = resp.json()
        except (httpx.HTTPError, ValueError):
            logger.exception("Error fetching owned games from Steam")
            return {}

        response = data.get("response") if isinstance(data, dict) else None
        games = response.get("games") if isinstance(response, dict) else None
        if not isinstance(games, list):
            logger.warning("No games data found in Steam API response")
            return {}

        items: dict[int, SourceItem] = {}
        for entry in games:
            try:
                game = OwnedGame.model_validate(entry)
            except ValidationError as exc:
                logger.warning("Skipping malformed Steam game entry: %s", exc)
                continue
            items[game.appid] = game.to_source_item()
        return items

    async def get_achievement_summary(self, appid: int) -> AchievementSummary:
        """Fetch the player's achievements for one game and summarize completion.

        A 400 response is Steam's answer for games without stats and yields an unknown
        summary, as does any other error response, malformed body, or network failure.
        """
        params = {"key": self._steam_key, "steamid": self._steam_id, "appid": appid}
        try:
            resp = await self._client.get(PLAYER_ACHIEVEMENTS_PATH, params=params)
        except httpx.HTTPError:
            logger.exception("Error fetching achievements for app %s from Steam", appid)
            return AchievementSummary.unknown()

        if resp.status_code == 400:
            notice = _player_stats_error(resp)
            if notice:
                logger.warning("Steam API notice for app %s: %s", appid, notice)
            return AchievementSummary.unknown()
        if resp.status_code != 200:
            logger.warning(
                "Error fetching achievements for app %s from Steam: HTTP %s",
                appid,
                resp.status_code,
            )
            return AchievementSummary.unknown()

        try:
            data = resp.json()
        except ValueError:
            logger.warning("Invalid achievements response body for app %s", appid)
            return AchievementSummary.unknown()
        return summary_from_player_stats(appid, data)


def _player_stats_error(resp: httpx.Response) -> str | None:
    """Extract ``playerstats.error`` from an error response, if present."""
    try:
        data = resp.json()
    except ValueError:
        return None
    player_stats = data.get("playerstats") if isinstance(data, dict) else None
    if not isinstance(player_stats, dict):
        return None
    error = player_stats.get("error")
    return str(error) if error else None
