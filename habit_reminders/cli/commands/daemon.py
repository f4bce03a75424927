"""Background daemon commands.

- Run the daemon
- Install / uninstall it as a login service
- Show its autostart state and whether the foreground app holds firing duty
"""

from __future__ import annotations

import sys

import click

from habit_reminders.autostart import install_autostart, select_autostart_provider
from habit_reminders.cli.utils import coro, error, header, info, success, warning
from habit_reminders.core.exceptions import AutostartError
from habit_reminders.core.settings import get_daemon_settings, get_reminder_settings
from habit_reminders.daemon.runner import run_daemon
from habit_reminders.features.reminders.liveness import LivenessMarker


@click.group(name="daemon")
def daemon() -> None:
    """Background reminder daemon commands."""


@daemon.command(name="run")
@coro
async def run_command() -> None:
    """Run the reminder daemon until SIGINT/SIGTERM.

    Exits with status 1 when the config directory is unusable.
    """
    exit_code = await run_daemon()
    if exit_code != 0:
        error("Daemon failed to start, see the log for details")
        sys.exit(exit_code)


@daemon.command()
def install() -> None:
    """Register the daemon to start at login and start it now."""
    provider = select_autostart_provider()

    if not provider.is_supported():
        warning("No autostart mechanism available on this platform")
        info("Reminders will only fire while the application is running")
        sys.exit(1)

    if not install_autostart(provider):
        error("Failed to install daemon, see the log for details")
        sys.exit(1)

    success(f"Daemon registered with {provider.name}")


@daemon.command()
def uninstall() -> None:
    """Stop the daemon and remove its autostart registration."""
    provider = select_autostart_provider()

    try:
        provider.uninstall()
    except AutostartError as e:
        error(f"Failed to uninstall daemon: {e.detail}")
        sys.exit(1)

    success("Daemon autostart removed")


@daemon.command()
def status() -> None:
    """Show autostart state and current firing duty."""
    provider = select_autostart_provider()
    reminder_settings = get_reminder_settings()
    marker = LivenessMarker(
        reminder_settings.marker_path,
        stale_after=get_daemon_settings().stale_after,
    )

    header("Reminder Daemon")
    click.echo(f"  Autostart provider : {provider.name}")
    click.echo(f"  Autostart state    : {provider.status()}")
    click.echo(f"  Config file        : {reminder_settings.config_path}")

    age = marker.age()
    if marker.is_alive():
        click.echo(f"  Firing duty        : foreground app (heartbeat {age:.0f}s ago)")
    elif age is not None:
        click.echo(f"  Firing duty        : daemon (stale marker, heartbeat {age:.0f}s ago)")
    else:
        click.echo("  Firing duty        : daemon")
