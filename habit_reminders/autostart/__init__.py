"""Autostart registration for the background daemon.

One provider is selected per host:

- Linux with systemd: a ``systemctl --user`` unit;
- macOS: a launchd LaunchAgent;
- anything else: no autostart, reminders fire only while the app runs.
"""

from __future__ import annotations

import logging
import sys

from habit_reminders.autostart.base import AutostartProvider, NoAutostart
from habit_reminders.autostart.launchd import LaunchAgentAutostart
from habit_reminders.autostart.systemd import SystemdUserAutostart
from habit_reminders.core.exceptions import AutostartError
from habit_reminders.core.settings import get_daemon_settings

logger = logging.getLogger(__name__)


def select_autostart_provider(
    platform: str | None = None,
    service_name: str | None = None,
) -> AutostartProvider:
    """Pick the autostart mechanism for a platform (``sys.platform`` style)."""
    platform = platform or sys.platform
    service_name = service_name or get_daemon_settings().service_name

    candidates: list[AutostartProvider] = []
    if platform.startswith("linux"):
        candidates.append(SystemdUserAutostart(service_name))
    elif platform == "darwin":
        candidates.append(LaunchAgentAutostart(service_name))

    for provider in candidates:
        if provider.is_supported():
            return provider
        logger.info("Autostart provider %s is not supported on this host", provider.name)
    return NoAutostart()


def install_autostart(provider: AutostartProvider | None = None) -> bool:
    """Register the daemon for autostart, logging instead of raising.

    Returns:
        True when the daemon is registered.
    """
    provider = provider or select_autostart_provider()
    try:
        provider.install()
    except AutostartError as e:
        logger.error(
            "Failed to install daemon autostart: %s",
            e.detail,
            extra={"provider": provider.name, **e.extra},
        )
        return False
    return True


__all__ = [
    "AutostartProvider",
    "LaunchAgentAutostart",
    "NoAutostart",
    "SystemdUserAutostart",
    "install_autostart",
    "select_autostart_provider",
]
