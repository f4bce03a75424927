"""Logging infrastructure.

Provides structured logging with:
- JSONL or colored text format
- Automatic context injection (reminder_id, job_id, source)
- QueueHandler + QueueListener for non-blocking I/O
- Per-handler log levels (console vs file)

Basic usage:
    from habit_reminders.infra.logging import log_context, setup_logging
    import logging

    setup_logging()
    logger = logging.getLogger(__name__)

    with log_context(reminder_id="c1"):
        logger.info("Delivering reminder")  # Includes reminder_id
"""

from habit_reminders.infra.logging.config import (
    complete,
    configure_logging,
    setup_logging,
    shutdown,
)
from habit_reminders.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    log_context,
    set_log_context,
)
from habit_reminders.infra.logging.formatters import (
    ColoredConsoleFormatter,
    JSONFormatter,
    should_colorize,
)

__all__ = [
    "ColoredConsoleFormatter",
    "ContextInjectingFilter",
    "JSONFormatter",
    "clear_log_context",
    "complete",
    "configure_logging",
    "get_log_context",
    "log_context",
    "set_log_context",
    "setup_logging",
    "should_colorize",
    "shutdown",
]
