"""Modular Pydantic Settings v2 configuration.

Settings are split by domain (reminders / daemon / logging), read from
environment variables, an optional .env file and optional YAML conf.d files,
and cached per process.

Import settings via cached loaders:
    from habit_reminders.core.settings import get_reminder_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. YAML/conf.d files
    3. Environment variables
    4. .env file
    5. secrets_dir
"""

from __future__ import annotations

from .daemon import DaemonSettings
from .loader import (
    clear_all_caches,
    get_daemon_settings,
    get_logging_settings,
    get_reminder_settings,
)
from .logs import LoggingSettings
from .reminders import ReminderSettings, default_config_dir

__all__ = [
    "DaemonSettings",
    "LoggingSettings",
    "ReminderSettings",
    "clear_all_caches",
    "default_config_dir",
    "get_daemon_settings",
    "get_logging_settings",
    "get_reminder_settings",
]
