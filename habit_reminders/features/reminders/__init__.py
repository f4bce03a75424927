"""Reminder definitions, the shared config store and the liveness marker."""

from habit_reminders.features.reminders.liveness import LivenessMarker
from habit_reminders.features.reminders.models import (
    Habit,
    ReminderConfig,
    habits_equal,
    normalize_habit,
    to_reminder_configs,
)
from habit_reminders.features.reminders.notifier import (
    Notifier,
    PlyerNotifier,
    ReminderDelivery,
    SoundPlayer,
)
from habit_reminders.features.reminders.recurrence import (
    ReminderTrigger,
    expand_triggers,
    triggers_for,
)
from habit_reminders.features.reminders.store import ReminderConfigStore

__all__ = [
    "Habit",
    "LivenessMarker",
    "Notifier",
    "PlyerNotifier",
    "ReminderConfig",
    "ReminderConfigStore",
    "ReminderDelivery",
    "ReminderTrigger",
    "SoundPlayer",
    "expand_triggers",
    "habits_equal",
    "normalize_habit",
    "to_reminder_configs",
    "triggers_for",
]
