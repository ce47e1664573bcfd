"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Iterable, Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .endpoints import TARGET_ENDPOINTS, EndpointConfig


DEFAULT_ENDPOINT_KEYS: tuple[str, ...] = tuple(
    endpoint.key for endpoint in TARGET_ENDPOINTS
)


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="catalogsync", alias="APP_NAME")

    db_secret: str | None = Field(default=None, alias="DB_SECRET")

    api_base_url: HttpUrl = Field(
        default="https://cinemaplus-app.vercel.app", alias="API_BASE_URL"
    )
    user_agent: str = Field(default="Mozilla/5.0", alias="USER_AGENT")
    request_timeout_seconds: float = Field(
        default=30.0, alias="REQUEST_TIMEOUT", gt=0, le=600
    )

    archive_path: Path = Field(default=Path("archive.enc"), alias="ARCHIVE_FILE")
    updates_path: Path = Field(default=Path("updates.json"), alias="UPDATES_FILE")

    source_namespace: str = Field(default="plus", alias="SOURCE_NAMESPACE", min_length=1)

    concurrency_limit: int = Field(
        default=15, alias="CONCURRENCY_LIMIT", ge=1, le=100
    )
    compaction_threshold: int = Field(
        default=1_000, alias="COMPACTION_THRESHOLD", ge=1
    )
    incremental_page_budget: int = Field(
        default=5, alias="INCREMENTAL_PAGE_BUDGET", ge=1
    )

    full_scan: bool = Field(default=False, alias="FULL_SCAN")
    auto_bootstrap: bool = Field(default=True, alias="AUTO_BOOTSTRAP")

    endpoint_keys: Annotated[tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_ENDPOINT_KEYS,
        alias="ENDPOINT_KEYS",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    @field_validator("endpoint_keys", mode="before")
    @classmethod
    def _parse_endpoint_keys(cls, value: object) -> tuple[str, ...]:
        """Normalise endpoint key selections from environment values."""

        if value is None:
            return DEFAULT_ENDPOINT_KEYS
        if isinstance(value, str):
            raw_values = [part.strip() for part in value.split(",")]
        elif isinstance(value, Iterable):
            raw_values = [str(part).strip() for part in value]
        else:
            raise TypeError("ENDPOINT_KEYS must be a string or iterable of strings")

        cleaned: list[str] = []
        for entry in raw_values:
            if not entry:
                continue
            slug = entry.replace("_", "-").replace(" ", "-").lower()
            slug = "-".join(filter(None, slug.split("-")))
            if not slug:
                continue
            if slug not in DEFAULT_ENDPOINT_KEYS:
                raise ValueError("Unknown endpoint keys configured")
            if slug not in cleaned:
                cleaned.append(slug)
        if not cleaned:
            return DEFAULT_ENDPOINT_KEYS
        return tuple(cleaned)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def endpoints(self) -> tuple[EndpointConfig, ...]:
        """Return endpoint definitions for the selected keys, in configured order."""

        endpoint_map = {endpoint.key: endpoint for endpoint in TARGET_ENDPOINTS}
        return tuple(endpoint_map[key] for key in self.endpoint_keys)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]
