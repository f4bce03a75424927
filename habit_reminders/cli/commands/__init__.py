"""CLI command groups."""

from habit_reminders.cli.commands import config, daemon, reminders

__all__ = ["config", "daemon", "reminders"]
