"""Application-level exception types.

Convention:
- ``ConfigurationError``: required settings are missing. Fatal before any network call.
- ``NotionAPIError``: the Notion API answered with a non-success status or an unreadable
  body. Raised by every ``NotionClient`` operation and never swallowed there; the sync
  driver catches it per item, and it is fatal only during the initial full read.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when required configuration values are missing."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing required configuration: {', '.join(self.missing)}")


class NotionAPIError(Exception):
    """Raised when a Notion API request does not succeed."""

    def __init__(self, status_code: int, body: str, *, method: str = "", path: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.method = method
        self.path = path
        super().__init__(f"Notion API request {method} {path} failed: {status_code} - {body}")
