"""Config file change watching for the daemon.

The containing directory is watched instead of the file itself: the store
replaces the file by renaming a temporary file over it, which a watch on
the file's inode would not survive. Events for any other file in the
directory (the temporary file, the liveness marker) are filtered out.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import logging
from pathlib import Path
from typing import Any

from watchfiles import Change, awatch

logger = logging.getLogger(__name__)


class ConfigFileFilter:
    """watchfiles filter that only passes events for one file name."""

    def __init__(self, file_name: str) -> None:
        self.file_name = file_name

    def __call__(self, change: Change, path: str) -> bool:
        return Path(path).name == self.file_name


class ConfigWatcher:
    """Calls ``on_change`` once per debounced burst of config file events.

    Args:
        path: The config file to watch.
        on_change: Coroutine function run after each burst.
        debounce_ms: Events closer together than this are grouped.
        stop_event: Set to end ``run()``.
    """

    def __init__(
        self,
        path: Path,
        on_change: Callable[[], Awaitable[Any]],
        *,
        debounce_ms: int = 500,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        self.path = Path(path)
        self.on_change = on_change
        self.debounce_ms = debounce_ms
        self.stop_event = stop_event or asyncio.Event()

    async def run(self) -> None:
        logger.info("Watching %s for reminder config changes", self.path)
        async for changes in awatch(
            self.path.parent,
            watch_filter=ConfigFileFilter(self.path.name),
            debounce=self.debounce_ms,
            stop_event=self.stop_event,
            recursive=False,
        ):
            logger.info(
                "Reminder config changed, rescheduling",
                extra={"changes": sorted(change.name for change, _ in changes)},
            )
            try:
                await self.on_change()
            except Exception:
                logger.exception("Failed to reload reminder config")
