"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with validation,
type coercion, and sensible defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BGGAPIConfig(BaseSettings):
    """BoardGameGeek XML API 2 configuration."""

    model_config = SettingsConfigDict(env_prefix="BGG_")

    token: SecretStr | None = Field(
        default=None,
        description="Bearer token registered at https://boardgamegeek.com/applications",
    )
    base_url: str = Field(
        default="https://boardgamegeek.com/xmlapi2",
        description="Base URL for the XML API 2",
    )
    timeout_seconds: int = Field(
        default=30,
        ge=5,
        le=120,
        description="HTTP request timeout in seconds",
    )
    user_agent: str = Field(
        default="boardgame-shelf/1.0 (personal project)",
        description="User-Agent header sent with every request",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URL so endpoint paths can be appended."""
        return v.rstrip("/")


class FetchConfig(BaseSettings):
    """Chunking, pacing and retry behavior for remote calls."""

    model_config = SettingsConfigDict(env_prefix="FETCH_")

    chunk_size: int = Field(
        default=30,
        ge=1,
        le=100,
        description="Number of ids per /thing request",
    )
    chunk_pause_seconds: float = Field(
        default=0.4,
        ge=0.0,
        le=30.0,
        description="Pause after every /thing request",
    )
    thing_max_attempts: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Attempts per /thing chunk before giving up",
    )
    thing_base_delay_seconds: float = Field(
        default=0.8,
        ge=0.0,
        le=30.0,
        description="Linear backoff step for /thing retries",
    )
    collection_max_attempts: int = Field(
        default=10,
        ge=1,
        le=30,
        description="Attempts for /collection before giving up",
    )
    collection_base_delay_seconds: float = Field(
        default=2.0,
        ge=0.0,
        le=60.0,
        description="Linear backoff step while the collection is being generated",
    )
    run_timeout_seconds: float = Field(
        default=900.0,
        gt=0.0,
        description="Wall-clock limit for a whole pipeline run",
    )


class PathsConfig(BaseSettings):
    """Local file locations."""

    model_config = SettingsConfigDict(env_prefix="SHELF_")

    manifest_path: Path = Field(
        default=Path("games.yaml"),
        description="Local manifest of tracked games",
    )
    output_path: Path = Field(
        default=Path("site/games.json"),
        description="JSON document consumed by the site",
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    format: Literal["json", "console"] = Field(
        default="json",
        description="Log output format",
    )
    include_timestamp: bool = Field(
        default=True,
        description="Include timestamp in log entries",
    )


class Settings(BaseSettings):
    """
    Main application settings.

    Aggregates all configuration sections and provides
    a single entry point for configuration access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bgg: BGGAPIConfig = Field(default_factory=BGGAPIConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def has_token(self) -> bool:
        """Check whether a non-empty API token is configured."""
        return self.bgg.token is not None and bool(self.bgg.token.get_secret_value())


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once
    and reused across the application.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
