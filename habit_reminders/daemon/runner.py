"""Daemon process entry point.

``run_daemon()`` owns the whole lifetime of the background process: it
prepares the working directory, builds the jobs, watches the config store
and waits for SIGINT/SIGTERM. It returns the process exit status: 0 after a
clean stop, 1 when startup failed.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from pathlib import Path
import signal

from habit_reminders.core.exceptions import DaemonStartupError
from habit_reminders.core.settings import (
    DaemonSettings,
    ReminderSettings,
    get_daemon_settings,
    get_reminder_settings,
)
from habit_reminders.daemon.scheduler import ReminderDaemon
from habit_reminders.daemon.watcher import ConfigWatcher
from habit_reminders.features.reminders.liveness import LivenessMarker
from habit_reminders.features.reminders.notifier import (
    Notifier,
    PlyerNotifier,
    ReminderDelivery,
    SoundPlayer,
)
from habit_reminders.features.reminders.store import ReminderConfigStore

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STARTUP_FAILED = 1


def prepare_working_dir(path: Path) -> None:
    """Create the config directory and check the daemon can use it.

    Raises:
        DaemonStartupError: If the directory cannot be created, read or written.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DaemonStartupError(
            detail=f"Cannot create config directory: {e}",
            extra={"path": str(path)},
        ) from e

    if not path.is_dir():
        raise DaemonStartupError(
            detail="Config directory path is not a directory",
            extra={"path": str(path)},
        )
    if not os.access(path, os.R_OK | os.W_OK | os.X_OK):
        raise DaemonStartupError(
            detail="Config directory is not readable and writable",
            extra={"path": str(path)},
        )


def build_daemon(
    reminder_settings: ReminderSettings,
    daemon_settings: DaemonSettings,
    *,
    notifier: Notifier | None = None,
    sound_player: SoundPlayer | None = None,
) -> ReminderDaemon:
    delivery = ReminderDelivery(
        notifier
        or PlyerNotifier(reminder_settings.app_name, timeout=reminder_settings.notification_timeout),
        sound_player,
        app_name=reminder_settings.app_name,
        volume=reminder_settings.sound_volume,
    )
    return ReminderDaemon(
        ReminderConfigStore(reminder_settings.config_path),
        LivenessMarker(reminder_settings.marker_path, stale_after=daemon_settings.stale_after),
        delivery,
        settings=daemon_settings,
    )


def _install_signal_handlers(stop_event: asyncio.Event) -> list[signal.Signals]:
    loop = asyncio.get_running_loop()
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError):
            # Not supported by the Windows proactor loop
            logger.debug("Cannot install handler for %s", sig.name)
            continue
        installed.append(sig)
    return installed


async def run_daemon(
    reminder_settings: ReminderSettings | None = None,
    daemon_settings: DaemonSettings | None = None,
    *,
    notifier: Notifier | None = None,
    sound_player: SoundPlayer | None = None,
    stop_event: asyncio.Event | None = None,
) -> int:
    """Run the background daemon until stopped.

    Args:
        reminder_settings: Store/marker locations (defaults to cached settings).
        daemon_settings: Daemon tuning (defaults to cached settings).
        notifier: Notification renderer (defaults to plyer).
        sound_player: Optional sound player.
        stop_event: Set to stop the daemon; SIGINT/SIGTERM set it too.

    Returns:
        Process exit status.
    """
    reminder_settings = reminder_settings or get_reminder_settings()
    daemon_settings = daemon_settings or get_daemon_settings()

    logger.info("Starting habit reminder daemon", extra={"config_path": str(reminder_settings.config_path)})

    try:
        prepare_working_dir(reminder_settings.config_dir)
    except DaemonStartupError as e:
        logger.error("Daemon startup failed: %s", e.detail, extra=e.extra)
        return EXIT_STARTUP_FAILED

    daemon = build_daemon(
        reminder_settings,
        daemon_settings,
        notifier=notifier,
        sound_player=sound_player,
    )
    stop_event = stop_event or asyncio.Event()
    installed = _install_signal_handlers(stop_event)
    watcher = ConfigWatcher(
        reminder_settings.config_path,
        daemon.reload,
        debounce_ms=daemon_settings.watch_debounce_ms,
        stop_event=stop_event,
    )

    watch_task: asyncio.Task[None] | None = None
    try:
        await daemon.start()
        watch_task = asyncio.create_task(watcher.run(), name="reminders-config-watch")
        await stop_event.wait()
        logger.info("Stop requested, shutting down habit reminder daemon")
    finally:
        stop_event.set()
        if watch_task is not None:
            watch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await watch_task
        await daemon.stop()
        loop = asyncio.get_running_loop()
        for sig in installed:
            loop.remove_signal_handler(sig)

    return EXIT_OK
