"""Tests for reminder and habit models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from habit_reminders.features.reminders.models import (
    Habit,
    ReminderConfig,
    habits_equal,
    normalize_habit,
    to_reminder_configs,
)


@pytest.mark.unit
class TestReminderConfig:
    def test_parses_string_day_keys(self):
        config = ReminderConfig.model_validate(
            {"id": "c1", "title": "Stretch", "days": {"0": True, "3": False}, "times": ["08:00"]}
        )

        assert config.days == {0: True, 3: False}
        assert config.enabled_days == frozenset({0})

    @pytest.mark.parametrize("value", ["8:00", "24:00", "12:60", "noon", ""])
    def test_rejects_malformed_times(self, value):
        with pytest.raises(ValidationError):
            ReminderConfig(id="c1", days={1: True}, times=[value])

    def test_rejects_weekday_out_of_range(self):
        with pytest.raises(ValidationError):
            ReminderConfig(id="c1", days={7: True}, times=["08:00"])

    def test_rejects_empty_id(self):
        with pytest.raises(ValidationError):
            ReminderConfig(id="", times=["08:00"])

    def test_duplicate_times_are_kept(self):
        config = ReminderConfig(id="c1", days={1: True}, times=["08:00", "08:00"])
        assert config.times == ["08:00", "08:00"]

    def test_is_schedulable(self):
        assert ReminderConfig(id="a", days={1: True}, times=["08:00"]).is_schedulable
        assert not ReminderConfig(id="b", days={1: False}, times=["08:00"]).is_schedulable
        assert not ReminderConfig(id="c", days={1: True}, times=[]).is_schedulable

    def test_to_document_omits_missing_sound(self):
        config = ReminderConfig(id="c1", title="Stretch", days={2: True, 0: True}, times=["08:00"])

        assert config.to_document() == {
            "id": "c1",
            "title": "Stretch",
            "days": {"0": True, "2": True},
            "times": ["08:00"],
        }

    def test_to_document_keeps_sound(self):
        config = ReminderConfig(id="c1", days={1: True}, times=["08:00"], sound="ding.mp3")
        assert config.to_document()["sound"] == "ding.mp3"


@pytest.mark.unit
class TestHabit:
    def test_accepts_camel_case_keys(self):
        habit = Habit.model_validate(
            {
                "id": "h1",
                "title": "Read",
                "notificationEnabled": True,
                "notificationDays": {"1": True},
                "notificationTimes": ["21:00"],
                "notificationSound": "bell",
            }
        )

        assert habit.notification_enabled is True
        assert habit.notification_days == {1: True}
        assert habit.notification_sound == "bell"

    def test_defaults(self):
        habit = Habit(id="h1")

        assert habit.notification_enabled is False
        assert habit.notification_days is None
        assert habit.notification_times == []


@pytest.mark.unit
class TestNormalizeHabit:
    def test_disabled_clears_days_and_sound_keeps_empty_times(self, habit_factory):
        habit = habit_factory(enabled=False, times=["08:00"], sound="bell")

        normalized = normalize_habit(habit)

        assert normalized.notification_days is None
        assert normalized.notification_sound is None
        assert normalized.notification_times == []

    def test_enabled_is_unchanged(self, habit_factory):
        habit = habit_factory(times=["08:00"], sound="bell")

        normalized = normalize_habit(habit)

        assert normalized == habit
        assert normalized is not habit


@pytest.mark.unit
class TestHabitsEqual:
    def test_equal_lists(self, habit_factory):
        assert habits_equal([habit_factory()], [habit_factory()])

    def test_detects_time_change(self, habit_factory):
        assert not habits_equal([habit_factory(times=["08:00"])], [habit_factory(times=["09:00"])])

    def test_order_matters(self, habit_factory):
        a, b = habit_factory("a"), habit_factory("b")
        assert not habits_equal([a, b], [b, a])

    def test_none_handling(self):
        assert habits_equal(None, None)
        assert not habits_equal(None, [])


@pytest.mark.unit
class TestToReminderConfigs:
    def test_keeps_only_active_habits(self, habit_factory):
        habits = [
            habit_factory("on"),
            habit_factory("off", enabled=False),
            habit_factory("no-times", times=[]),
            habit_factory("no-days", days={1: False}),
        ]

        configs = to_reminder_configs(habits)

        assert [c.id for c in configs] == ["on"]
        assert configs[0].days == {1: True}
        assert configs[0].times == ["23:59"]
