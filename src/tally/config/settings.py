"""Application settings and configuration."""

import os
import re
import sys
from pathlib import Path
from typing import Literal, Optional

import pytz
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

APP_ID = "com.tally.app"
DB_FILENAME = "tally.db"

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def get_default_data_dir(environment: str = "dev") -> Path:
    """Return the default data directory for a deployment environment."""
    if environment == "dev":
        return PROJECT_ROOT / "dev-data"

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_ID
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA") or Path.home()) / APP_ID
    return Path.home() / ".local" / "share" / APP_ID


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TALLY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Tally"
    app_version: str = "0.1.0"

    # "dev" keeps data next to the checkout, "packaged" uses the OS app-data dir
    environment: Literal["dev", "packaged"] = "dev"

    # Data directory (all app data lives here)
    data_dir: Optional[Path] = None

    # SQLite file URL; overrides data_dir/tally.db when set
    database_url: Optional[str] = None

    # Accounts created without a currency use this one
    base_currency: str = "GBP"

    # Zone used to decide what "today" is for current balances
    timezone: str = "Europe/London"

    log_level: str = "INFO"

    @field_validator("base_currency")
    @classmethod
    def _check_currency(cls, value: str) -> str:
        value = value.strip().upper()
        if not re.fullmatch(r"[A-Z]{3}", value):
            raise ValueError(f"base_currency must be a 3-letter code, got {value!r}")
        return value

    @field_validator("database_url")
    @classmethod
    def _check_database_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        try:
            url = make_url(value)
        except ArgumentError as exc:
            raise ValueError(f"Invalid database_url: {value!r}") from exc
        if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
            raise ValueError(f"database_url must point at a SQLite file, got {value!r}")
        return value

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return value

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir(self.environment)
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_path(self) -> Path:
        """Get the SQLite database file location."""
        if self.database_url:
            return Path(make_url(self.database_url).database).expanduser()
        return self.get_data_dir() / DB_FILENAME

    def get_database_url(self) -> str:
        """Get the URL of the database file from get_database_path."""
        return f"sqlite:///{self.get_database_path()}"


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (used by the desktop shell)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
