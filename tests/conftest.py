"""Pytest configuration and shared fixtures.

Organization:
    - Environment Fixtures: isolated config directory and settings caches
    - Delivery Fixtures: recording notifier and sound player
    - Clock Fixtures: controllable wall clock
    - Data Fixtures: habit and reminder factories

Every test gets its own config directory through REMINDERS_CONFIG_DIR, so
nothing touches the real per-user reminder files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

from habit_reminders.core.settings import (
    DaemonSettings,
    ReminderSettings,
    clear_all_caches,
)
from habit_reminders.features.reminders.models import Habit, ReminderConfig
from habit_reminders.features.reminders.notifier import ReminderDelivery

# Monday; weekday number 1 in the config file numbering
MONDAY_10AM = datetime(2024, 1, 1, 10, 0, 0)


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every settings class at a per-test directory.

    Returns:
        The reminder config directory (not yet created).
    """
    config_dir = tmp_path / "config"
    monkeypatch.setenv("REMINDERS_CONFIG_DIR", str(config_dir))
    # Keep YAML conf/ files of the working tree out of the tests
    monkeypatch.setenv("REMINDERS_CONFIG_FILES_DIR", str(tmp_path / "conf"))
    monkeypatch.setenv("DAEMON_CONFIG_FILES_DIR", str(tmp_path / "conf"))
    monkeypatch.setenv("LOGGING_CONFIG_FILES_DIR", str(tmp_path / "conf"))
    clear_all_caches()
    yield config_dir
    clear_all_caches()


@pytest.fixture
def reminder_settings(isolated_config_dir: Path) -> ReminderSettings:
    """Fast-ticking foreground settings for service tests."""
    return ReminderSettings(
        config_dir=isolated_config_dir,
        debounce_ms=20,
        initial_schedule_delay=0.0,
        rollover_check_interval=0.02,
        heartbeat_interval=0.02,
    )


@pytest.fixture
def daemon_settings() -> DaemonSettings:
    return DaemonSettings(watch_debounce_ms=50, heartbeat_stale_after=120)


# ============================================================================
# Delivery Fixtures
# ============================================================================


@dataclass
class RecordingNotifier:
    """Notifier that records calls instead of showing anything."""

    calls: list[dict[str, Any]] = field(default_factory=list)
    fail: bool = False

    def notify(self, title: str, message: str, *, reminder_id: str | None = None) -> None:
        if self.fail:
            raise RuntimeError("notification service unavailable")
        self.calls.append({"title": title, "message": message, "reminder_id": reminder_id})


@dataclass
class RecordingSoundPlayer:
    played: list[tuple[str, int]] = field(default_factory=list)

    def play(self, sound: str, volume: int) -> None:
        self.played.append((sound, volume))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def sound_player() -> RecordingSoundPlayer:
    return RecordingSoundPlayer()


@pytest.fixture
def delivery(notifier: RecordingNotifier, sound_player: RecordingSoundPlayer) -> ReminderDelivery:
    return ReminderDelivery(notifier, sound_player, app_name="Habit Reminders", volume=80)


# ============================================================================
# Clock Fixtures
# ============================================================================


class FakeClock:
    """Callable wall clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at Monday 2024-01-01 10:00:00."""
    return FakeClock(MONDAY_10AM)


# ============================================================================
# Data Fixtures
# ============================================================================


def make_habit(
    habit_id: str = "c1",
    title: str = "Stretch",
    *,
    enabled: bool = True,
    days: dict[int, bool] | None = None,
    times: list[str] | None = None,
    sound: str | None = None,
) -> Habit:
    """Build a habit; defaults to notifications on, Monday only, 23:59."""
    return Habit(
        id=habit_id,
        title=title,
        notification_enabled=enabled,
        notification_days={1: True} if days is None else days,
        notification_times=["23:59"] if times is None else times,
        notification_sound=sound,
    )


def make_reminder(
    reminder_id: str = "c1",
    title: str = "Stretch",
    *,
    days: dict[int, bool] | None = None,
    times: list[str] | None = None,
    sound: str | None = None,
) -> ReminderConfig:
    return ReminderConfig(
        id=reminder_id,
        title=title,
        days={1: True} if days is None else days,
        times=["23:59"] if times is None else times,
        sound=sound,
    )


@pytest.fixture
def habit_factory():
    return make_habit


@pytest.fixture
def reminder_factory():
    return make_reminder
