"""Weekly recurrence for reminder times.

Every reminder expands into one ``ReminderTrigger`` per configured time: a
weekly rule at a fixed hour/minute restricted to the reminder's enabled
weekdays. Both schedulers work from this one representation:

- the foreground scheduler asks a trigger whether it fires today and when,
  and arms a one-shot timer;
- the daemon turns each trigger into a long-lived APScheduler cron job.

Which of the two actually delivers a notification is decided at fire time
by the liveness marker, not here.

The rule itself is expressed with python-dateutil's rrule (RFC 5545), e.g.
``FREQ=WEEKLY;BYDAY=MO,WE,FR;BYHOUR=8;BYMINUTE=30;BYSECOND=0``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from dateutil.rrule import FR, MO, SA, SU, TH, TU, WE, WEEKLY, rrule

from habit_reminders.features.reminders.models import ReminderConfig


class Weekday(str, Enum):
    """Days of the week, valued by their iCalendar BYDAY code."""

    SUNDAY = "SU"
    MONDAY = "MO"
    TUESDAY = "TU"
    WEDNESDAY = "WE"
    THURSDAY = "TH"
    FRIDAY = "FR"
    SATURDAY = "SA"


# Index = weekday number used in the config file (0 = Sunday)
WEEKDAYS_BY_NUMBER: tuple[Weekday, ...] = (
    Weekday.SUNDAY,
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
    Weekday.FRIDAY,
    Weekday.SATURDAY,
)

_DATEUTIL_WEEKDAYS = {
    Weekday.MONDAY: MO,
    Weekday.TUESDAY: TU,
    Weekday.WEDNESDAY: WE,
    Weekday.THURSDAY: TH,
    Weekday.FRIDAY: FR,
    Weekday.SATURDAY: SA,
    Weekday.SUNDAY: SU,
}

_SHORT_NAMES = {
    Weekday.SUNDAY: "Sun",
    Weekday.MONDAY: "Mon",
    Weekday.TUESDAY: "Tue",
    Weekday.WEDNESDAY: "Wed",
    Weekday.THURSDAY: "Thu",
    Weekday.FRIDAY: "Fri",
    Weekday.SATURDAY: "Sat",
}


def weekday_number(day: date) -> int:
    """Return the config-file weekday number (0 = Sunday) of a date."""
    return (day.weekday() + 1) % 7


def parse_time(value: str) -> tuple[int, int]:
    """Split an "HH:MM" string into (hour, minute).

    Raises:
        ValueError: If the value is not a valid 24h time.
    """
    try:
        hour_str, minute_str = value.split(":")
        hour, minute = int(hour_str), int(minute_str)
    except ValueError:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM") from None
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return hour, minute


def format_time(moment: datetime) -> str:
    """Format a datetime as "HH:MM"."""
    return f"{moment.hour:02d}:{moment.minute:02d}"


@dataclass(frozen=True)
class ReminderTrigger:
    """One weekly trigger: a reminder at one time of day on its enabled weekdays."""

    reminder_id: str
    title: str
    time: str
    weekdays: frozenset[int]
    sound: str | None = None

    @property
    def hour(self) -> int:
        return parse_time(self.time)[0]

    @property
    def minute(self) -> int:
        return parse_time(self.time)[1]

    @property
    def weekday_codes(self) -> list[Weekday]:
        """Enabled weekdays in Sunday-first order."""
        return [WEEKDAYS_BY_NUMBER[number] for number in sorted(self.weekdays)]

    def fires_on(self, day: date) -> bool:
        return weekday_number(day) in self.weekdays

    def occurrence_on(self, moment: datetime) -> datetime:
        """The trigger's time on the calendar day of ``moment`` (same tzinfo)."""
        return moment.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)

    def to_rrule_string(self) -> str:
        days = ",".join(code.value for code in self.weekday_codes)
        return f"FREQ=WEEKLY;BYDAY={days};BYHOUR={self.hour};BYMINUTE={self.minute};BYSECOND=0"

    def to_rrule(self, dtstart: datetime) -> rrule:
        return rrule(
            WEEKLY,
            dtstart=dtstart.replace(second=0, microsecond=0),
            byweekday=[_DATEUTIL_WEEKDAYS[code] for code in self.weekday_codes],
            byhour=self.hour,
            byminute=self.minute,
            bysecond=0,
        )

    def next_occurrence(self, after: datetime) -> datetime | None:
        """Get the first occurrence strictly after ``after``.

        Returns:
            The next fire time, or None when no weekday is enabled.
        """
        if not self.weekdays:
            return None
        return self.to_rrule(after).after(after, inc=False)

    def cron_day_of_week(self) -> str:
        """Weekdays as a cron ``day_of_week`` expression (e.g. "sun,mon")."""
        return ",".join(_SHORT_NAMES[code].lower() for code in self.weekday_codes)

    def describe(self) -> str:
        """Human-readable description like "Mon, Wed and Fri at 08:30"."""
        if len(self.weekdays) == 7:
            return f"Every day at {self.time}"
        names = [_SHORT_NAMES[code] for code in self.weekday_codes]
        if not names:
            return f"Never (no weekday enabled) at {self.time}"
        if len(names) == 1:
            return f"{names[0]} at {self.time}"
        return f"{', '.join(names[:-1])} and {names[-1]} at {self.time}"


def triggers_for(config: ReminderConfig) -> list[ReminderTrigger]:
    """Expand one reminder into its triggers, one per configured time.

    Duplicate times produce duplicate triggers; a reminder without enabled
    weekdays or without times produces none.
    """
    if not config.is_schedulable:
        return []
    weekdays = config.enabled_days
    return [
        ReminderTrigger(
            reminder_id=config.id,
            title=config.title,
            time=time,
            weekdays=weekdays,
            sound=config.sound,
        )
        for time in config.times
    ]


def expand_triggers(configs: Iterable[ReminderConfig]) -> list[ReminderTrigger]:
    """Expand a reminder list into all of its triggers, in list order."""
    return [trigger for config in configs for trigger in triggers_for(config)]


__all__ = [
    "WEEKDAYS_BY_NUMBER",
    "ReminderTrigger",
    "Weekday",
    "expand_triggers",
    "format_time",
    "parse_time",
    "triggers_for",
    "weekday_number",
]
