"""In-process reminder scheduling for the running application."""

from habit_reminders.foreground.bridge import (
    ConfigSyncBridge,
    HostBridge,
    NotificationClicked,
    SyncConfig,
)
from habit_reminders.foreground.debounce import Debouncer
from habit_reminders.foreground.scheduler import ForegroundScheduler, ScheduledNotification
from habit_reminders.foreground.service import ForegroundService
from habit_reminders.foreground.state import ReminderStateStore

__all__ = [
    "ConfigSyncBridge",
    "Debouncer",
    "ForegroundScheduler",
    "ForegroundService",
    "HostBridge",
    "NotificationClicked",
    "ReminderStateStore",
    "ScheduledNotification",
    "SyncConfig",
]
