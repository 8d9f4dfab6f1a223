"""
Configuration settings for studytrack.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="STUDYTRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".studytrack",
        description="Directory holding the key-value state file",
    )
    store_file: str = Field(
        default="state.json",
        description="Name of the JSON key-value state file",
    )

    # ========================================
    # AI Integration (quiz generation + insight)
    # ========================================
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("STUDYTRACK_GEMINI_API_KEY", "GEMINI_API_KEY"),
        description="Google Generative AI (Gemini) API key",
    )
    ai_model: str = Field(
        default="gemini-2.0-flash",
        description="Gemini model for quiz and insight generation",
    )

    # ========================================
    # Dashboard
    # ========================================
    study_streak: int = Field(
        default=0,
        ge=0,
        description="Consecutive active days, tracked outside the core",
    )
    needs_attention_limit: int = Field(
        default=3,
        ge=1,
        description="How many weak concepts the dashboard lists",
    )
    default_time_spent_minutes: int = Field(
        default=10,
        ge=0,
        description="Minutes recorded for a review when the session does not report one",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    @property
    def store_path(self) -> Path:
        """Full path of the state file."""
        return Path(self.data_dir).expanduser() / self.store_file

    def has_ai_configured(self) -> bool:
        """Check if a Gemini key is available from the environment."""
        return bool(self.gemini_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
