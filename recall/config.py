"""
Configuration settings for recall.

Uses Pydantic Settings for environment variable management with .env file support.
Every setting can be overridden with a ``RECALL_`` prefixed variable, e.g.
``RECALL_DATABASE_PATH=/tmp/exercises.db``.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RECALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    database_path: Path = Field(
        default=Path.home() / ".recall" / "exercises.db",
        description="SQLite database holding the exercises",
    )
    export_dir: Path = Field(
        default=Path("."),
        description="Directory for exercises exported by 'quit and edit'",
    )

    # ========================================
    # Review Session
    # ========================================
    time_box_minutes: int = Field(
        default=20,
        ge=0,
        description="Wall-clock budget for one review run",
    )

    # ========================================
    # Interval Algorithm
    # ========================================
    one_day: int = Field(
        default=1,
        ge=1,
        description="Interval in days after the first successful review",
    )
    max_interval: int = Field(
        default=90,
        ge=1,
        description="Upper bound for the review interval in days",
    )
    easiness_factor: int = Field(
        default=2,
        ge=1,
        description="Interval multiplier for each further successful review",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
