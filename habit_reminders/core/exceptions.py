"""Custom exception classes for the reminder subsystem."""

from __future__ import annotations

from typing import Any


class ReminderError(Exception):
    """Base reminder-subsystem exception.

    All custom exceptions should inherit from this class.

    Attributes:
        detail: Human-readable error message.
        type: Error type identifier, stable across releases.
        extra: Additional context-specific information about the error.

    Example:
        raise ReminderError(
            detail="Config directory is not writable",
            type="config-dir-not-writable",
            extra={"path": "/home/alice/.config/habit-reminders"}
        )
    """

    default_type = "reminder-error"

    def __init__(
        self,
        detail: str,
        type: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize reminder exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            extra: Additional context about the error.
        """
        self.detail = detail
        self.type = type or self.default_type
        self.extra = extra or {}
        super().__init__(detail)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for structured log records."""
        return {"type": self.type, "detail": self.detail, **self.extra}


class ConfigStoreError(ReminderError):
    """Base class for reminder config file failures."""

    default_type = "config-store-error"


class ConfigReadError(ConfigStoreError):
    """Raised when the reminder config file cannot be read or parsed.

    Example:
        raise ConfigReadError(
            detail="Config document is not a JSON array",
            extra={"path": str(path)}
        )
    """

    default_type = "config-read-failed"


class ConfigWriteError(ConfigStoreError):
    """Raised when the reminder config file cannot be replaced."""

    default_type = "config-write-failed"


class DaemonStartupError(ReminderError):
    """Raised when the background daemon cannot start.

    The daemon runner maps this to a non-zero exit status.
    """

    default_type = "daemon-startup-failed"


class AutostartError(ReminderError):
    """Raised when an autostart provider fails to install or remove itself."""

    default_type = "autostart-failed"
