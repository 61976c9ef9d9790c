"""Runtime configuration for the CMS client.

Relies on pydantic-settings so that environment variables (prefixed with ``ATTRACTIONS_``)
can override defaults. See `.env.example` for common values.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Captures runtime configuration for attraction lookups."""

    cms_base_url: str = Field(
        default="https://api.expeditionlapland.com",
        description="Base URL of the headless CMS (no trailing slash)",
    )
    collection: str = Field(default="atrakcjes", description="CMS collection holding attraction entries")
    revalidate_seconds: int = Field(
        default=3600,
        description="Advisory time-to-live sent with each request for upstream/shared caches",
    )
    request_timeout_s: float = Field(default=10.0, description="HTTP timeout in seconds")
    user_agent: str = Field(default="attraction-cms/0.1.0")
    media_base_url: Optional[str] = Field(
        default=None,
        description="Prefix for relative media URLs; falls back to cms_base_url",
    )
    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("data/logs"))
    log_file: str = Field(default="attractions.log", description="File name inside log_dir for CLI runs")
    output_dir: Path = Field(default=Path("data/output"), description="Where CLI exports are written")

    model_config = SettingsConfigDict(
        env_prefix="ATTRACTIONS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )

    @field_validator("cms_base_url", mode="before")
    def _strip_base_url(cls, value: str) -> str:  # noqa: D401
        value = str(value).strip()
        if not value:
            raise ValueError("cms_base_url must not be empty")
        return value.rstrip("/")

    @field_validator("media_base_url", mode="before")
    def _strip_media_base_url(cls, value: str | None) -> Optional[str]:
        if value in (None, ""):
            return None
        return str(value).strip().rstrip("/")

    @field_validator("collection", mode="before")
    def _strip_collection(cls, value: str) -> str:
        value = str(value).strip().strip("/")
        if not value:
            raise ValueError("collection must not be empty")
        return value

    @field_validator("revalidate_seconds")
    def _validate_revalidate(cls, value: int) -> int:
        if value < 0:
            raise ValueError("revalidate_seconds must not be negative")
        return value

    @field_validator("log_dir", "output_dir", mode="before")
    def _expand_path(cls, value: str | Path) -> Path:
        if isinstance(value, Path):
            return value
        return Path(value).expanduser()

    def ensure_directories(self) -> None:
        """Create directories that must exist at runtime."""
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def collection_url(self) -> str:
        return f"{self.cms_base_url}/api/{self.collection}"

    def resolved_media_base_url(self) -> str:
        return self.media_base_url or self.cms_base_url

    def request_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        if self.revalidate_seconds:
            headers["Cache-Control"] = f"max-age={self.revalidate_seconds}"
        else:
            logger.debug("Revalidation disabled; requesting fresh CMS responses")
            headers["Cache-Control"] = "no-cache"
        return headers
