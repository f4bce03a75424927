"""Background daemon settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_daemon_yaml_source


class DaemonSettings(BaseSettings):
    """Background daemon configuration.

    Environment variables use DAEMON_ prefix.
    Example: DAEMON_WATCH_DEBOUNCE_MS=800, DAEMON_HEARTBEAT_STALE_AFTER=0
    """

    watch_debounce_ms: int = Field(
        default=500,
        ge=50,
        le=60_000,
        description="Coalescing window for config file change events",
    )
    heartbeat_stale_after: float = Field(
        default=120.0,
        ge=0.0,
        description=(
            "Seconds after which a liveness marker that was not refreshed counts "
            "as stale. 0 treats any existing marker as alive."
        ),
    )
    misfire_grace_time: int = Field(
        default=60,
        ge=1,
        le=3600,
        description="Seconds a late job may still run (e.g. after a short suspend)",
    )
    service_name: str = Field(
        default="habit-reminders-daemon",
        description="Name used for the autostart unit / agent",
    )

    model_config = SettingsConfigDict(
        env_prefix="DAEMON_",
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
            create_daemon_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    @property
    def stale_after(self) -> float | None:
        """Heartbeat threshold, or None for existence-only liveness."""
        return self.heartbeat_stale_after or None
