"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "millbook.db"

    # SQLite settings
    pool_size: int = 3
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class ThresholdSettings(BaseSettings):
    """Advisory production thresholds. Never used to reject an entry."""

    model_config = SettingsConfigDict(env_prefix="THRESHOLD_")

    min_oil_yield: float = 38.0  # percent
    max_process_loss: float = 7.0  # percent
    max_breakdown_minutes: int = 45
    min_runtime_minutes: int = 300


class SecuritySettings(BaseSettings):
    """Password policy and hashing configuration."""

    model_config = SettingsConfigDict(env_prefix="SECURITY_")

    min_password_length: int = 6
    temp_password_length: int = 8
    bcrypt_rounds: int = 12


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Millbook"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    thresholds: ThresholdSettings = Field(default_factory=ThresholdSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

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
