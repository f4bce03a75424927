"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the
process. The foreground service and the daemon each load their own copy.

Usage:
    from habit_reminders.core.settings.loader import get_reminder_settings

    settings = get_reminder_settings()  # First call: loads and validates
    settings = get_reminder_settings()  # Subsequent calls: cached instance

Testing:
    Clear the caches to force a reload after changing the environment:
    clear_all_caches()
"""

from __future__ import annotations

from functools import lru_cache

from .daemon import DaemonSettings
from .logs import LoggingSettings
from .reminders import ReminderSettings


@lru_cache(maxsize=1)
def get_reminder_settings() -> ReminderSettings:
    """Get cached reminder settings.

    Returns:
        Validated and frozen ReminderSettings instance.
    """
    return ReminderSettings()


@lru_cache(maxsize=1)
def get_daemon_settings() -> DaemonSettings:
    """Get cached daemon settings.

    Returns:
        Validated and frozen DaemonSettings instance.
    """
    return DaemonSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


def clear_all_caches() -> None:
    """Clear all settings caches.

    Useful for testing or when you need to force reload settings.
    """
    get_reminder_settings.cache_clear()
    get_daemon_settings.cache_clear()
    get_logging_settings.cache_clear()
