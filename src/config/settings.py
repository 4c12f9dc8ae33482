"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from datetime import timedelta
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "smarttask.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class SchedulingSettings(BaseSettings):
    """Reminder scheduling policy and sweep configuration."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULING_")

    lead_time_minutes: int = Field(default=5, ge=0)
    sweep_interval_seconds: int = Field(default=60, ge=1)
    sweep_batch_limit: int = Field(default=100, ge=1, le=1000)

    # 0 disables the per work item limit
    max_active_reminders: int = Field(default=0, ge=0)
    overdue_grace_minutes: int = Field(default=5, ge=0)

    # Misfired reminder jobs still run if the worker was down for less than this
    misfire_grace_seconds: int = 300

    # A claimed reminder is left to its firer for this long before another may take it
    claim_timeout_seconds: int = Field(default=300, ge=1)

    @property
    def lead_time(self) -> timedelta:
        return timedelta(minutes=self.lead_time_minutes)

    @property
    def overdue_grace(self) -> timedelta:
        return timedelta(minutes=self.overdue_grace_minutes)

    @property
    def claim_timeout(self) -> timedelta:
        return timedelta(seconds=self.claim_timeout_seconds)


class NotificationSettings(BaseSettings):
    """Notification delivery configuration."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_")

    provider: Literal["log", "webhook"] = "log"
    webhook_url: str = ""
    timeout: float = 10.0

    # Retry on transport errors (webhook only)
    max_retries: int = Field(default=3, ge=1, le=10)
    retry_delay: float = Field(default=0.5, ge=0.0)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "SmartTask Reminders"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Actor recorded on transitions made by background jobs
    system_actor: str = "system"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    scheduling: SchedulingSettings = Field(default_factory=SchedulingSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

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


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
