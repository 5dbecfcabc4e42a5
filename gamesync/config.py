"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gamesync.exceptions import ConfigurationError

REQUIRED_FIELDS: tuple[str, ...] = (
    "notion_api_key",
    "notion_database_id",
    "steam_key",
    "steam_id",
)


class Settings(BaseSettings):
    """gamesync settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Notion
    notion_api_key: str = ""
    notion_database_id: str = ""
    notion_version: str = "2022-06-28"
    notion_base_url: str = "https://api.notion.com/v1"

    # Steam
    steam_key: str = ""
    steam_id: str = ""
    steam_language: str = "schinese"
    steam_base_url: str = "https://api.steampowered.com"

    # Runtime
    debug: bool = False
    request_timeout: float = Field(default=30.0, gt=0)

    def missing_required(self) -> list[str]:
        """Return environment variable names of required settings that are empty."""
        return [name.upper() for name in REQUIRED_FIELDS if not getattr(self, name).strip()]

    def validate_required(self) -> None:
        """Raise ConfigurationError if any required setting is missing."""
        missing = self.missing_required()
        if missing:
            raise ConfigurationError(missing)
