"""Pydantic models for reminder definitions.

Two shapes exist:

- ``Habit`` is what the foreground application holds: a habit with its
  notification fields, which may be switched off.
- ``ReminderConfig`` is what gets persisted to the shared config file and
  read by the background daemon. Only habits with notifications switched on
  and something to schedule are converted into one.

Weekdays are integers 0-6 with 0 = Sunday, the same numbering the config
file has always used.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

TIME_PATTERN = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")

# Fields compared by habits_equal(); anything else on a habit does not
# influence scheduling.
NOTIFICATION_FIELDS: tuple[str, ...] = (
    "id",
    "title",
    "notification_enabled",
    "notification_days",
    "notification_times",
    "notification_sound",
)


def validate_times(times: list[str]) -> list[str]:
    """Ensure every entry is a zero-padded 24h "HH:MM" string."""
    for value in times:
        if not isinstance(value, str) or not TIME_PATTERN.match(value):
            raise ValueError(f"Invalid time {value!r}, expected HH:MM (24h)")
    return times


def validate_days(days: dict[int, bool] | None) -> dict[int, bool] | None:
    """Ensure every weekday key is in 0-6."""
    if days is None:
        return None
    for day in days:
        if not 0 <= day <= 6:
            raise ValueError(f"Invalid weekday {day}, expected 0 (Sunday) to 6 (Saturday)")
    return days


def enabled_days_of(days: dict[int, bool] | None) -> frozenset[int]:
    """Return the weekdays switched on in a day mapping."""
    return frozenset(day for day, enabled in (days or {}).items() if enabled)


class ReminderConfig(BaseModel):
    """One persisted reminder: a full-replace snapshot entry of the config file."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1)
    title: str = ""
    days: dict[int, bool] = Field(default_factory=dict)
    times: list[str] = Field(default_factory=list)
    sound: str | None = None

    @field_validator("times")
    @classmethod
    def check_times(cls, value: list[str]) -> list[str]:
        return validate_times(value)

    @field_validator("days")
    @classmethod
    def check_days(cls, value: dict[int, bool]) -> dict[int, bool]:
        return validate_days(value) or {}

    @property
    def enabled_days(self) -> frozenset[int]:
        return enabled_days_of(self.days)

    @property
    def is_schedulable(self) -> bool:
        """True when there is at least one enabled weekday and one time."""
        return bool(self.enabled_days and self.times)

    def to_document(self) -> dict[str, Any]:
        """Serialize to the on-disk JSON shape (string day keys, no null sound)."""
        document: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "days": {str(day): enabled for day, enabled in sorted(self.days.items())},
            "times": list(self.times),
        }
        if self.sound is not None:
            document["sound"] = self.sound
        return document


class Habit(BaseModel):
    """The notification-relevant part of a habit as held by the foreground app.

    Accepts both snake_case and the camelCase keys the UI layer uses
    (``notificationEnabled``, ``notificationDays``...).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str = Field(..., min_length=1)
    title: str = ""
    notification_enabled: bool = False
    notification_days: dict[int, bool] | None = None
    notification_times: list[str] = Field(default_factory=list)
    notification_sound: str | None = None

    @field_validator("notification_times")
    @classmethod
    def check_times(cls, value: list[str]) -> list[str]:
        return validate_times(value)

    @field_validator("notification_days")
    @classmethod
    def check_days(cls, value: dict[int, bool] | None) -> dict[int, bool] | None:
        return validate_days(value)

    @property
    def enabled_days(self) -> frozenset[int]:
        return enabled_days_of(self.notification_days)

    def to_reminder_config(self) -> ReminderConfig:
        return ReminderConfig(
            id=self.id,
            title=self.title,
            days=dict(self.notification_days or {}),
            times=list(self.notification_times),
            sound=self.notification_sound,
        )


def normalize_habit(habit: Habit) -> Habit:
    """Drop notification settings that have no effect.

    A habit with notifications switched off keeps an empty time list (not
    None) so the cleared state persists; its days and sound are removed.
    """
    if habit.notification_enabled:
        return habit.model_copy(
            update={
                "notification_days": dict(habit.notification_days)
                if habit.notification_days is not None
                else None,
                "notification_times": list(habit.notification_times),
            }
        )
    return habit.model_copy(
        update={
            "notification_days": None,
            "notification_times": [],
            "notification_sound": None,
        }
    )


def habits_equal(a: Sequence[Habit] | None, b: Sequence[Habit] | None) -> bool:
    """Compare two habit lists on the fields that influence scheduling.

    Order matters: the same habits in a different order are not equal.
    """
    if a is None or b is None:
        return a is b
    if len(a) != len(b):
        return False
    for left, right in zip(a, b, strict=True):
        if left is right:
            continue
        for field in NOTIFICATION_FIELDS:
            if getattr(left, field) != getattr(right, field):
                return False
    return True


def to_reminder_configs(habits: Iterable[Habit]) -> list[ReminderConfig]:
    """Convert habits into the persisted reminder list.

    Only habits with notifications switched on, at least one time and at
    least one enabled weekday are kept.
    """
    return [
        habit.to_reminder_config()
        for habit in habits
        if habit.notification_enabled and habit.notification_times and habit.enabled_days
    ]
