"""Configuration package for the job tracker."""

from .settings import (
    DatabaseSettings,
    SheetsSettings,
    SyncSettings,
    LoggingSettings,
    AppSettings,
    get_settings
)

from .schema import (
    SheetConfig,
    SHEET_CONFIG_EXAMPLE
)

from .loader import (
    ConfigLoader,
    ConfigurationError,
    load_config_from_env
)

__all__ = [
    "DatabaseSettings",
    "SheetsSettings",
    "SyncSettings",
    "LoggingSettings",
    "AppSettings",
    "get_settings",

    "SheetConfig",
    "SHEET_CONFIG_EXAMPLE",

    "ConfigLoader",
    "ConfigurationError",
    "load_config_from_env"
]
