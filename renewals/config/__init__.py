"""Configuration module."""

from renewals.config.logging import configure_logging, get_logger, tick_context
from renewals.config.settings import Settings, get_settings, reset_settings, today

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "today",
    "configure_logging",
    "get_logger",
    "tick_context",
]
