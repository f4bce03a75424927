"""Background reminder daemon scheduling.

The daemon keeps one APScheduler cron job per (reminder, time) pair, firing
weekly on the reminder's enabled weekdays. Whenever the config store
changes the whole job set is thrown away and rebuilt from a fresh read.

Each job carries the generation it was built in. Reloads bump the
generation under the same lock that firing takes, so a job that was
already queued when a reload replaced it finds itself stale and does
nothing instead of firing a reminder that no longer exists. Only that
check holds the lock; the notification itself is shown from a worker
thread.

When a job fires while the foreground application is alive (per the
liveness marker) the notification is suppressed: the foreground scheduler
owns delivery then.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from collections.abc import Sequence
import logging
from typing import Any

from apscheduler.schedulers.asyncio import (
    AsyncIOScheduler,  # type: ignore[import-untyped]
)
from apscheduler.triggers.cron import CronTrigger  # type: ignore[import-untyped]

from habit_reminders.core.settings import DaemonSettings, get_daemon_settings
from habit_reminders.features.reminders.liveness import LivenessMarker
from habit_reminders.features.reminders.models import ReminderConfig
from habit_reminders.features.reminders.notifier import ReminderDelivery
from habit_reminders.features.reminders.recurrence import ReminderTrigger, expand_triggers
from habit_reminders.features.reminders.store import ReminderConfigStore
from habit_reminders.infra.logging import log_context

logger = logging.getLogger(__name__)


def job_ids_for(triggers: Sequence[ReminderTrigger]) -> list[str]:
    """Compute stable job ids, keeping duplicate times independent.

    The first occurrence of a time in a reminder is ``"<id>-<HH:MM>"``;
    repeats get ``"#2"``, ``"#3"``... appended.
    """
    seen: Counter[str] = Counter()
    ids = []
    for trigger in triggers:
        base = f"{trigger.reminder_id}-{trigger.time}"
        seen[base] += 1
        ids.append(base if seen[base] == 1 else f"{base}#{seen[base]}")
    return ids


class ReminderDaemon:
    """Owns the daemon's APScheduler instance and its reminder jobs.

    Args:
        store: Config store to read reminders from.
        marker: Liveness marker of the foreground application.
        delivery: Delivers a reminder when the daemon owns firing duty.
        settings: Daemon settings (defaults to the cached ones).
        scheduler: Injected scheduler, mainly for tests.
    """

    def __init__(
        self,
        store: ReminderConfigStore,
        marker: LivenessMarker,
        delivery: ReminderDelivery,
        *,
        settings: DaemonSettings | None = None,
        scheduler: AsyncIOScheduler | None = None,
    ) -> None:
        self.settings = settings or get_daemon_settings()
        self.store = store
        self.marker = marker
        self.delivery = delivery
        self.scheduler = scheduler or AsyncIOScheduler(
            job_defaults={
                "coalesce": True,  # Combine missed runs into one
                "max_instances": 1,  # Only one instance of each job at a time
                "misfire_grace_time": self.settings.misfire_grace_time,
            },
        )
        self.generation = 0
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return bool(self.scheduler.running)

    async def start(self) -> None:
        """Build jobs from the current store contents and start the scheduler."""
        await self.reload()
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Reminder daemon scheduler started with %d jobs", len(self.scheduler.get_jobs()))

    async def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Reminder daemon scheduler stopped")

    async def reload(self) -> int:
        """Rebuild all jobs from a fresh store read.

        Returns:
            Number of jobs now scheduled.
        """
        async with self._lock:
            return self.rebuild(self.store.read())

    def rebuild(self, configs: Sequence[ReminderConfig]) -> int:
        """Replace every job with the ones ``configs`` need.

        Callers outside ``reload()`` must not run concurrently with firing.
        """
        self.scheduler.remove_all_jobs()
        self.generation += 1

        triggers = expand_triggers(configs)
        for job_id, trigger in zip(job_ids_for(triggers), triggers, strict=True):
            self.scheduler.add_job(
                func=self.fire,
                trigger=CronTrigger(
                    day_of_week=trigger.cron_day_of_week(),
                    hour=trigger.hour,
                    minute=trigger.minute,
                ),
                args=(self.generation, trigger, job_id),
                id=job_id,
                name=f"{trigger.title or trigger.reminder_id}: {trigger.describe()}",
                replace_existing=True,
            )

        logger.info(
            "Scheduled %d reminder jobs from %d reminders (generation %d)",
            len(triggers),
            len(configs),
            self.generation,
        )
        return len(triggers)

    async def fire(self, generation: int, trigger: ReminderTrigger, job_id: str) -> bool:
        """Run one job.

        Returns:
            True when a notification was delivered.
        """
        with log_context(reminder_id=trigger.reminder_id, job_id=job_id):
            async with self._lock:
                if generation != self.generation:
                    logger.debug("Ignoring job from stale generation %d", generation)
                    return False

                if self.marker.is_alive():
                    logger.info("Foreground app is running, suppressing daemon reminder")
                    return False

            # Notifier backends block on D-Bus or platform APIs
            return await asyncio.to_thread(
                self.delivery.deliver, trigger.reminder_id, trigger.title, trigger.sound
            )

    def get_job_status(self) -> list[dict[str, Any]]:
        """Get status of all scheduled reminder jobs.

        Returns:
            List of job information dictionaries.
        """
        jobs = []
        for job in self.scheduler.get_jobs():
            # Jobs added before start() have no next run time yet
            next_run = getattr(job, "next_run_time", None)
            jobs.append(
                {
                    "id": job.id,
                    "name": job.name,
                    "next_run_time": next_run.isoformat() if next_run else None,
                    "trigger": str(job.trigger),
                }
            )
        return jobs
