"""Configuration package."""

from wallet.config.settings import (
    LedgerSettings,
    LoggingSettings,
    Settings,
    get_settings,
)

__all__ = [
    "LedgerSettings",
    "LoggingSettings",
    "Settings",
    "get_settings",
]
