"""Foreground reminder scheduling settings."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_reminders_yaml_source

APP_DIR_NAME = "habit-reminders"


def default_config_dir(platform: str | None = None) -> Path:
    """Return the per-OS application data directory.

    Args:
        platform: Value in the style of ``sys.platform``; defaults to the host.

    Returns:
        Directory that holds the reminder config file and liveness marker.
    """
    platform = platform or sys.platform
    home = Path.home()

    if platform.startswith("linux"):
        base = os.getenv("XDG_CONFIG_HOME") or str(home / ".config")
        return Path(base) / APP_DIR_NAME
    if platform == "darwin":
        return home / "Library" / "Application Support" / APP_DIR_NAME
    if platform in ("win32", "cygwin"):
        base = os.getenv("APPDATA") or str(home / "AppData" / "Roaming")
        return Path(base) / APP_DIR_NAME
    return home / f".{APP_DIR_NAME}"


class ReminderSettings(BaseSettings):
    """Reminder store location and foreground scheduler tuning.

    Environment variables use REMINDERS_ prefix.
    Example: REMINDERS_CONFIG_DIR=/tmp/reminders, REMINDERS_DEBOUNCE_MS=250
    """

    app_name: str = Field(
        default="Habit Reminders",
        description="Application name shown on desktop notifications",
    )

    # Shared files
    config_dir: Path = Field(
        default_factory=default_config_dir,
        description="Directory holding the reminder config file and liveness marker",
    )
    config_file_name: str = Field(
        default="habit-notification-config.json",
        description="File name of the persisted reminder list",
    )
    marker_file_name: str = Field(
        default="app.lock",
        description="File name of the foreground liveness marker",
    )

    # Scheduling
    debounce_ms: int = Field(
        default=500,
        ge=0,
        le=60_000,
        description="Coalescing window for reminder list changes",
    )
    initial_schedule_delay: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Seconds to wait after start before the first schedule build",
    )
    rollover_check_interval: float = Field(
        default=60.0,
        gt=0.0,
        le=3600.0,
        description="Seconds between checks for the local midnight rollover",
    )
    heartbeat_interval: float = Field(
        default=30.0,
        gt=0.0,
        le=3600.0,
        description="Seconds between liveness marker refreshes",
    )

    # Delivery
    sound_volume: int = Field(
        default=100,
        ge=0,
        le=100,
        description="Reminder sound volume; 0 disables sound playback",
    )
    notification_timeout: int = Field(
        default=10,
        ge=1,
        le=600,
        description="Seconds a desktop notification stays visible",
    )

    model_config = SettingsConfigDict(
        env_prefix="REMINDERS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_reminders_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    @computed_field
    @property
    def config_path(self) -> Path:
        """Full path of the persisted reminder list."""
        return self.config_dir / self.config_file_name

    @computed_field
    @property
    def marker_path(self) -> Path:
        """Full path of the liveness marker."""
        return self.config_dir / self.marker_file_name

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000
