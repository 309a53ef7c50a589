"""Configuration package."""

from finance_tracker.config.settings import (
    AppSettings,
    MindeeSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "MindeeSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
