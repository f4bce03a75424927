"""Tests for core exceptions."""

from habit_reminders.core import exceptions as exc


def test_reminder_error_defaults() -> None:
    error = exc.ReminderError(detail="bad")
    assert error.type == "reminder-error"
    assert error.extra == {}
    assert str(error) == "bad"


def test_subclass_default_types() -> None:
    assert exc.ConfigReadError(detail="x").type == "config-read-failed"
    assert exc.ConfigWriteError(detail="x").type == "config-write-failed"
    assert exc.DaemonStartupError(detail="x").type == "daemon-startup-failed"
    assert exc.AutostartError(detail="x").type == "autostart-failed"


def test_store_errors_share_a_base() -> None:
    assert issubclass(exc.ConfigReadError, exc.ConfigStoreError)
    assert issubclass(exc.ConfigWriteError, exc.ConfigStoreError)
    assert issubclass(exc.ConfigStoreError, exc.ReminderError)


def test_explicit_type_and_extra() -> None:
    error = exc.ConfigReadError(detail="nope", type="config-missing", extra={"path": "/x"})
    assert error.type == "config-missing"
    assert error.to_dict() == {"type": "config-missing", "detail": "nope", "path": "/x"}
