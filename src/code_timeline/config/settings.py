"""Application settings management using Pydantic Settings."""

import logging
from pathlib import Path
from typing import Self

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_storage_path() -> str:
    """Get default history file path in the working directory."""
    return str(Path.cwd() / "data" / "timeline.json")


class Settings(BaseSettings):
    """Application configuration settings.

    All settings can be configured via environment variables with the
    prefix `CODE_TIMELINE_`. For example, `CODE_TIMELINE_STORAGE_PATH`.
    """

    # Storage
    storage_path: str = Field(
        default_factory=_get_default_storage_path,
        description="JSON file holding the snapshot history",
    )
    json_indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentation of the history file (0 = compact)",
    )

    # Retention
    max_entries: int = Field(
        default=1000,
        ge=1,
        description="Maximum number of snapshots kept before the oldest are evicted",
    )

    # Aggregation
    default_interval_ms: int = Field(
        default=300_000,  # 5 minutes
        ge=1000,
        description="Default width of a timeline bucket in milliseconds",
    )
    recent_limit: int = Field(
        default=15,
        ge=1,
        le=1000,
        description="Number of snapshots returned by the recent list",
    )

    # Snapshot cache
    seed_cache_from_history: bool = Field(
        default=False,
        description="Rebuild the last-known content of each file from history on startup",
    )

    # Tracking filter (host side)
    workspace_roots: list[str] = Field(
        default_factory=list,
        description="Only files under these roots are tracked (empty = any file)",
    )
    exclude_patterns: list[str] = Field(
        default_factory=list,
        description="Additional gitignore-style patterns excluded from tracking",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_prefix="CODE_TIMELINE_", env_file=".env", env_file_encoding="utf-8"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize and check the logging level name."""
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

    @model_validator(mode="after")
    def validate_storage_path(self) -> Self:
        """Reject a storage path that points at an existing directory."""
        if Path(self.storage_path).is_dir():
            raise ValueError(
                f"storage_path must be a file, got directory: {self.storage_path}"
            )
        return self
