"""Foreground reminder service.

Ties the habit state store to the foreground scheduler for the lifetime of
the host application:

- list changes are debounced and trigger a full rebuild;
- the first build runs shortly after start;
- a periodic check rebuilds once the local date rolls over, arming the
  new day's reminders;
- the liveness marker is created on start, refreshed on a fixed heartbeat
  and removed on stop, so the daemon stays quiet while this process runs.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine, Sequence
from datetime import date, datetime
import logging
from typing import Any, Self

from habit_reminders.core.settings import ReminderSettings, get_reminder_settings
from habit_reminders.features.reminders.liveness import LivenessMarker
from habit_reminders.features.reminders.models import Habit
from habit_reminders.features.reminders.notifier import (
    Notifier,
    PlyerNotifier,
    ReminderDelivery,
    SoundPlayer,
)
from habit_reminders.features.reminders.store import ReminderConfigStore
from habit_reminders.foreground.bridge import ConfigSyncBridge
from habit_reminders.foreground.debounce import Debouncer
from habit_reminders.foreground.scheduler import ForegroundScheduler, local_now
from habit_reminders.foreground.state import ReminderStateStore

logger = logging.getLogger(__name__)


class ForegroundService:
    """Owned handle for foreground scheduling with explicit start/stop.

    Example:
        service = ForegroundService.create(habits=habits)
        async with service:
            service.state.upsert(edited_habit)
            ...
    """

    def __init__(
        self,
        state: ReminderStateStore,
        scheduler: ForegroundScheduler,
        marker: LivenessMarker,
        *,
        settings: ReminderSettings | None = None,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self.settings = settings or get_reminder_settings()
        self.state = state
        self.scheduler = scheduler
        self.marker = marker
        self.clock = clock
        self._debouncer = Debouncer(self.settings.debounce_seconds, self.rebuild)
        self._tasks: list[asyncio.Task[None]] = []
        self._unsubscribe: Callable[[], None] | None = None
        self._built_for: date | None = None

    @classmethod
    def create(
        cls,
        settings: ReminderSettings | None = None,
        *,
        habits: Sequence[Habit] = (),
        notifier: Notifier | None = None,
        sound_player: SoundPlayer | None = None,
        clock: Callable[[], datetime] = local_now,
    ) -> Self:
        """Build a service wired to the configured store and marker paths."""
        settings = settings or get_reminder_settings()
        delivery = ReminderDelivery(
            notifier or PlyerNotifier(settings.app_name, timeout=settings.notification_timeout),
            sound_player,
            app_name=settings.app_name,
            volume=settings.sound_volume,
        )
        scheduler = ForegroundScheduler(
            delivery,
            ConfigSyncBridge(ReminderConfigStore(settings.config_path)),
            clock=clock,
        )
        return cls(
            ReminderStateStore(habits),
            scheduler,
            LivenessMarker(settings.marker_path),
            settings=settings,
            clock=clock,
        )

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    async def start(self) -> None:
        if self.running:
            logger.warning("Foreground reminder service is already running")
            return

        self.scheduler.open()
        try:
            self.marker.acquire()
        except OSError:
            # Timers still run; the daemon may then deliver the same reminders
            logger.exception("Failed to create liveness marker %s", self.marker.path)
        self._unsubscribe = self.state.subscribe(self._debouncer.trigger)
        self._spawn(self._initial_build(), "reminders-initial-build")
        self._spawn(self._rollover_loop(), "reminders-rollover")
        self._spawn(self._heartbeat_loop(), "reminders-heartbeat")
        logger.info("Foreground reminder service started")

    async def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._debouncer.cancel()

        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self.scheduler.close()
        try:
            self.marker.release()
        except OSError:
            logger.exception("Failed to remove liveness marker %s", self.marker.path)
        logger.info("Foreground reminder service stopped")

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    def rebuild(self, habits: Sequence[Habit] | None = None) -> None:
        """Recompute today's timers from ``habits`` (default: the current state)."""
        self._built_for = self.clock().date()
        self.scheduler.update_schedule(self.state.habits if habits is None else habits)

    def _spawn(self, coro: Coroutine[Any, Any, None], name: str) -> None:
        self._tasks.append(asyncio.create_task(coro, name=name))

    async def _initial_build(self) -> None:
        await asyncio.sleep(self.settings.initial_schedule_delay)
        self.rebuild()

    async def _rollover_loop(self) -> None:
        while True:
            await asyncio.sleep(self.settings.rollover_check_interval)
            today = self.clock().date()
            if self._built_for is not None and today != self._built_for:
                logger.info("Local date changed to %s, rebuilding reminder schedule", today)
                self.rebuild()

    async def _heartbeat_loop(self) -> None:
        while True:
            await asyncio.sleep(self.settings.heartbeat_interval)
            try:
                self.marker.touch()
            except OSError:
                logger.exception("Failed to refresh liveness marker %s", self.marker.path)
