"""Habit reminder scheduling: foreground timers plus a background daemon."""

__version__ = "0.1.0"
