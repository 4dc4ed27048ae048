"""
Application settings with Pydantic v2 validation.

Each group reads its own env prefix (STORAGE_, REMINDER_, NOTIFIER_, API_).
Bad values fail at startup instead of on the first reminder tick.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "renewals.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class ReminderEngineSettings(BaseSettings):
    """Reminder scheduling configuration."""

    model_config = SettingsConfigDict(env_prefix="REMINDER_")

    # Fallback lead times when neither the catalog nor the user sets any
    default_offsets: list[int] = [30, 7]
    default_channels: list[Literal["email", "sms", "push", "in_app"]] = ["email"]

    # Upper bound for a single notifier call
    notifier_timeout_seconds: float = 15.0

    # Periodic tick
    scheduler_enabled: bool = False
    tick_interval_hours: int = Field(default=6, ge=1, le=24)
    timezone: str = "Europe/London"

    @field_validator("default_offsets")
    @classmethod
    def sort_offsets(cls, v: list[int]) -> list[int]:
        if not v or any(o <= 0 for o in v):
            raise ValueError("default_offsets must be positive integers")
        return sorted(set(v), reverse=True)

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {v}") from e
        return v


class NotifierSettings(BaseSettings):
    """Outbound notifier configuration."""

    model_config = SettingsConfigDict(env_prefix="NOTIFIER_")

    webhook_url: str | None = None
    timeout: float = 10.0
    max_retries: int = 2
    retry_delay: float = 0.5


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Renewal Reminder Engine"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    reminders: ReminderEngineSettings = Field(default_factory=ReminderEngineSettings)
    notifier: NotifierSettings = Field(default_factory=NotifierSettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def today() -> date:
    """Current day in the configured reminder timezone."""
    return datetime.now(ZoneInfo(get_settings().reminders.timezone)).date()


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
