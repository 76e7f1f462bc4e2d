"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_SECRET_KEY = "dev-insecure-secret-change-me"


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "mro.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class AuthSettings(BaseSettings):
    """Session token verification."""

    model_config = SettingsConfigDict(env_prefix="AUTH_")

    secret_key: str = DEV_SECRET_KEY
    algorithm: str = "HS256"
    token_expire_minutes: int = 60
    issuer: str | None = None


class ActivitySettings(BaseSettings):
    """Activity log dispatcher configuration."""

    model_config = SettingsConfigDict(env_prefix="ACTIVITY_")

    enabled: bool = True
    queue_size: int = 1000
    max_attempts: int = 3
    retry_delay: float = 0.5


class ScheduleSettings(BaseSettings):
    """Wheel rotation schedule windows."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULE_")

    default_upcoming_days: int = 30
    max_upcoming_days: int = 365


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "MRO Maintenance Service"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    activity: ActivitySettings = Field(default_factory=ActivitySettings)
    schedule: ScheduleSettings = Field(default_factory=ScheduleSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings

    @property
    def uses_dev_secret(self) -> bool:
        return self.auth.secret_key == DEV_SECRET_KEY


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
