"""CLI utilities for running async operations and formatting output."""

from habit_reminders.cli.utils.async_runner import coro
from habit_reminders.cli.utils.formatters import (
    error,
    format_time_until,
    header,
    info,
    print_table,
    success,
    warning,
)

__all__ = [
    "coro",
    "error",
    "format_time_until",
    "header",
    "info",
    "print_table",
    "success",
    "warning",
]
