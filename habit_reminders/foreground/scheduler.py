"""Foreground reminder scheduler.

While the application runs, reminders for the rest of today are armed as
one-shot timers on the host event loop. The schedule is never merged:
every ``update_schedule()`` cancels all pending timers and recomputes
from the full habit list, then pushes that list to the config store so
the background daemon sees the same reminders.

Times at or before the current minute are skipped, never fired late.
Tomorrow's reminders are armed by the midnight rebuild the foreground
service performs.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
import logging

from habit_reminders.features.reminders.models import Habit
from habit_reminders.features.reminders.notifier import ReminderDelivery
from habit_reminders.features.reminders.recurrence import format_time, triggers_for
from habit_reminders.foreground.bridge import ConfigSyncBridge

logger = logging.getLogger(__name__)


def local_now() -> datetime:
    return datetime.now()


@dataclass(eq=False)
class ScheduledNotification:
    """A one-shot timer for one habit at one time today."""

    habit_id: str
    habit_title: str
    scheduled_time: str
    fire_at: datetime
    delay: float
    sound: str | None = None
    handle: asyncio.TimerHandle | None = field(default=None, repr=False)

    def cancel(self) -> None:
        if self.handle is not None:
            self.handle.cancel()


class ForegroundScheduler:
    """Owns today's pending reminder timers.

    Args:
        delivery: Plays the sound and shows the notification when a timer fires.
        sync_bridge: Receives the full habit list after every rebuild. Optional
            so the scheduler can run without a config store.
        clock: Returns the current local wall-clock time.
        loop: Event loop to arm timers on; defaults to the running loop.
    """

    def __init__(
        self,
        delivery: ReminderDelivery,
        sync_bridge: ConfigSyncBridge | None = None,
        *,
        clock: Callable[[], datetime] = local_now,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.delivery = delivery
        self.sync_bridge = sync_bridge
        self.clock = clock
        self._loop = loop
        self._pending: list[ScheduledNotification] = []
        self._closed = False

    @property
    def pending(self) -> tuple[ScheduledNotification, ...]:
        return tuple(self._pending)

    def update_schedule(self, habits: Sequence[Habit]) -> list[ScheduledNotification]:
        """Replace all pending timers with the ones ``habits`` need today.

        Returns:
            The newly armed notifications.
        """
        if self._closed:
            logger.debug("Scheduler is closed, ignoring schedule update")
            return []

        self.clear()

        loop = self._loop or asyncio.get_running_loop()
        now = self.clock()
        current_time = format_time(now)

        for habit in habits:
            if not habit.notification_enabled:
                continue
            for trigger in triggers_for(habit.to_reminder_config()):
                # Zero-padded HH:MM strings compare chronologically
                if not trigger.fires_on(now.date()) or trigger.time <= current_time:
                    continue

                fire_at = trigger.occurrence_on(now)
                entry = ScheduledNotification(
                    habit_id=habit.id,
                    habit_title=habit.title,
                    scheduled_time=trigger.time,
                    fire_at=fire_at,
                    delay=(fire_at - now).total_seconds(),
                    sound=trigger.sound,
                )
                entry.handle = loop.call_later(entry.delay, self._fire, entry)
                self._pending.append(entry)

        logger.info("Scheduled %d habit reminders for today", len(self._pending))

        if self.sync_bridge is not None:
            self.sync_bridge.push(habits)

        return list(self._pending)

    def clear(self) -> None:
        """Cancel every pending timer."""
        for entry in self._pending:
            entry.cancel()
        self._pending.clear()

    def open(self) -> None:
        """Accept schedule updates again after ``close()``."""
        self._closed = False

    def close(self) -> None:
        self.clear()
        self._closed = True

    def _fire(self, entry: ScheduledNotification) -> None:
        # A timer cancelled after it was already queued still runs once
        if not any(pending is entry for pending in self._pending):
            logger.debug("Ignoring cancelled reminder timer for %s", entry.habit_id)
            return

        self._pending = [pending for pending in self._pending if pending is not entry]
        logger.debug("Reminder timer fired for %s at %s", entry.habit_id, entry.scheduled_time)
        self.delivery.deliver(entry.habit_id, entry.habit_title, entry.sound)
