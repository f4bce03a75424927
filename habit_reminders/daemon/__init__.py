"""Background reminder daemon that keeps firing after the app is closed."""

from habit_reminders.daemon.runner import run_daemon
from habit_reminders.daemon.scheduler import ReminderDaemon
from habit_reminders.daemon.watcher import ConfigWatcher

__all__ = ["ConfigWatcher", "ReminderDaemon", "run_daemon"]
