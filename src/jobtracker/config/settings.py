"""Application configuration settings."""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Local persistence configuration."""

    url: str = Field(default="sqlite:///./data/jobtracker.db")

    model_config = SettingsConfigDict(env_prefix="JOBTRACKER_DB_")


class SheetsSettings(BaseSettings):
    """Google Sheets values API configuration."""

    base_url: str = Field(default="https://sheets.googleapis.com")
    default_range: str = Field(default="Applications!A:H")
    request_timeout_seconds: float = Field(default=30.0)
    user_agent: str = Field(default="JobTracker/1.0")

    model_config = SettingsConfigDict(env_prefix="JOBTRACKER_SHEETS_")


class SyncSettings(BaseSettings):
    """Sync coordinator behaviour."""

    operation_timeout_seconds: float = Field(default=30.0)
    error_message_ttl_seconds: float = Field(default=5.0)
    success_message_ttl_seconds: float = Field(default=3.0)
    connectivity_probe_host: str = Field(default="sheets.googleapis.com")
    connectivity_probe_port: int = Field(default=443)
    connectivity_probe_timeout_seconds: float = Field(default=1.5)

    model_config = SettingsConfigDict(env_prefix="JOBTRACKER_SYNC_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO")
    format: str = Field(default="console")
    file_path: Optional[str] = Field(default="./logs/jobtracker.log")

    model_config = SettingsConfigDict(env_prefix="JOBTRACKER_LOG_")


class AppSettings(BaseSettings):
    """Main application settings."""

    name: str = Field(default="Job Application Tracker")
    version: str = Field(default="1.0.0")
    environment: str = Field(default="development")

    # Sub-settings
    database: DatabaseSettings = DatabaseSettings()
    sheets: SheetsSettings = SheetsSettings()
    sync: SyncSettings = SyncSettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_prefix="JOBTRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = AppSettings()


def get_settings() -> AppSettings:
    """Get application settings."""
    return settings
