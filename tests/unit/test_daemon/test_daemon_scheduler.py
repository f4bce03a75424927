"""Tests for the daemon's weekly reminder jobs."""

from __future__ import annotations

import asyncio
import os
import threading
import time

import pytest

from habit_reminders.daemon.scheduler import ReminderDaemon, job_ids_for
from habit_reminders.features.reminders.liveness import LivenessMarker
from habit_reminders.features.reminders.notifier import ReminderDelivery
from habit_reminders.features.reminders.recurrence import expand_triggers
from habit_reminders.features.reminders.store import ReminderConfigStore


@pytest.fixture
def store(tmp_path) -> ReminderConfigStore:
    return ReminderConfigStore(tmp_path / "habit-notification-config.json")


@pytest.fixture
def marker(tmp_path, daemon_settings) -> LivenessMarker:
    return LivenessMarker(tmp_path / "app.lock", stale_after=daemon_settings.stale_after)


@pytest.fixture
def daemon(store, marker, delivery, daemon_settings) -> ReminderDaemon:
    return ReminderDaemon(store, marker, delivery, settings=daemon_settings)


@pytest.mark.unit
class TestJobIds:
    def test_duplicate_times_get_suffixes(self, reminder_factory):
        triggers = expand_triggers(
            [
                reminder_factory("c1", times=["08:00", "09:00", "08:00", "08:00"]),
                reminder_factory("c2", times=["08:00"]),
            ]
        )

        assert job_ids_for(triggers) == [
            "c1-08:00",
            "c1-09:00",
            "c1-08:00#2",
            "c1-08:00#3",
            "c2-08:00",
        ]


@pytest.mark.unit
class TestRebuild:
    def test_job_count_is_sum_of_times_over_schedulable_reminders(self, daemon, reminder_factory):
        configs = [
            reminder_factory("a", times=["08:00", "12:00", "12:00"]),
            reminder_factory("b", days={0: True, 6: True}, times=["10:00"]),
            reminder_factory("no-days", days={}, times=["10:00"]),
            reminder_factory("no-times", times=[]),
        ]

        assert daemon.rebuild(configs) == 4
        assert sorted(job.id for job in daemon.scheduler.get_jobs()) == [
            "a-08:00",
            "a-12:00",
            "a-12:00#2",
            "b-10:00",
        ]

    def test_cron_trigger_matches_reminder(self, daemon, reminder_factory):
        daemon.rebuild([reminder_factory("b", days={0: True, 6: True}, times=["07:45"])])

        job = daemon.scheduler.get_job("b-07:45")
        fields = {f.name: str(f) for f in job.trigger.fields}
        assert fields["day_of_week"] == "sun,sat"
        assert fields["hour"] == "7"
        assert fields["minute"] == "45"

    def test_rebuild_replaces_all_jobs_and_bumps_generation(self, daemon, reminder_factory):
        daemon.rebuild([reminder_factory("a")])
        first_generation = daemon.generation

        daemon.rebuild([reminder_factory("b")])

        assert [job.id for job in daemon.scheduler.get_jobs()] == ["b-23:59"]
        assert daemon.generation == first_generation + 1

    async def test_reload_reads_store(self, daemon, store, reminder_factory):
        store.write([reminder_factory("a", times=["06:00", "07:00"])])

        assert await daemon.reload() == 2

    async def test_reload_with_missing_store_schedules_nothing(self, daemon):
        assert await daemon.reload() == 0
        assert daemon.scheduler.get_jobs() == []

    def test_job_status(self, daemon, reminder_factory):
        daemon.rebuild([reminder_factory("a", title="Stretch", days={1: True, 3: True}, times=["08:30"])])

        [status] = daemon.get_job_status()

        assert status["id"] == "a-08:30"
        assert status["name"] == "Stretch: Mon and Wed at 08:30"
        assert status["next_run_time"] is None  # scheduler not started


@pytest.mark.unit
class TestFire:
    def _trigger(self, daemon, reminder_factory):
        daemon.rebuild([reminder_factory("c1", title="Stretch", sound="bell")])
        job = daemon.scheduler.get_job("c1-23:59")
        return job.args

    async def test_fires_when_foreground_is_not_running(
        self, daemon, reminder_factory, notifier, sound_player
    ):
        args = self._trigger(daemon, reminder_factory)

        assert await daemon.fire(*args) is True

        assert notifier.calls == [
            {"title": "Habit Reminders", "message": "Habit Reminder: Stretch", "reminder_id": "c1"}
        ]
        assert sound_player.played == [("bell", 80)]

    async def test_suppressed_while_marker_is_alive(self, daemon, marker, reminder_factory, notifier):
        marker.acquire()
        args = self._trigger(daemon, reminder_factory)

        assert await daemon.fire(*args) is False

        assert notifier.calls == []

    async def test_stale_marker_does_not_suppress(self, daemon, marker, reminder_factory, notifier):
        marker.acquire()
        old = time.time() - 600
        os.utime(marker.path, (old, old))
        args = self._trigger(daemon, reminder_factory)

        assert await daemon.fire(*args) is True
        assert len(notifier.calls) == 1

    async def test_existence_only_marker_suppresses_even_when_old(
        self, store, tmp_path, delivery, daemon_settings, reminder_factory, notifier
    ):
        marker = LivenessMarker(tmp_path / "app.lock", stale_after=None)
        marker.acquire()
        os.utime(marker.path, (0, 0))
        daemon = ReminderDaemon(store, marker, delivery, settings=daemon_settings)
        args = self._trigger(daemon, reminder_factory)

        assert await daemon.fire(*args) is False
        assert notifier.calls == []

    async def test_slow_notifier_does_not_block_reload(
        self, store, marker, daemon_settings, reminder_factory
    ):
        release = threading.Event()
        shown = []

        class SlowNotifier:
            def notify(self, title, message, *, reminder_id=None):
                release.wait(timeout=5)
                shown.append(reminder_id)

        daemon = ReminderDaemon(store, marker, ReminderDelivery(SlowNotifier()), settings=daemon_settings)
        args = self._trigger(daemon, reminder_factory)

        firing = asyncio.create_task(daemon.fire(*args))
        await asyncio.sleep(0.05)
        assert await asyncio.wait_for(daemon.reload(), timeout=1) == 0

        release.set()
        assert await asyncio.wait_for(firing, timeout=5) is True
        assert shown == ["c1"]

    async def test_job_from_stale_generation_is_ignored(self, daemon, reminder_factory, notifier):
        args = self._trigger(daemon, reminder_factory)
        daemon.rebuild([reminder_factory("c1", title="Stretch")])

        assert await daemon.fire(*args) is False
        assert notifier.calls == []


@pytest.mark.unit
class TestLifecycle:
    async def test_start_and_stop(self, daemon, store, reminder_factory):
        store.write([reminder_factory("a", days={d: True for d in range(7)}, times=["08:00"])])

        await daemon.start()
        try:
            assert daemon.running
            [status] = daemon.get_job_status()
            assert status["next_run_time"] is not None
        finally:
            await daemon.stop()

        assert not daemon.running
