"""Configuration module."""

from src.config.logging import bound_context, configure_logging, get_logger
from src.config.settings import (
    NotificationSettings,
    SchedulingSettings,
    Settings,
    StorageSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "StorageSettings",
    "SchedulingSettings",
    "NotificationSettings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "bound_context",
    "get_logger",
]
