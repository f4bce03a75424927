"""Liveness marker: tells the daemon whether the foreground app is running.

The marker is a zero-byte file beside the reminder config. The foreground
service creates it on start, refreshes its modification time on a fixed
interval (the heartbeat), and removes it on clean shutdown. The daemon only
reads it.

With ``stale_after`` set, a marker whose heartbeat is older than that many
seconds counts as absent, so a foreground process that died without
removing its marker stops suppressing daemon notifications once the
threshold passes. With ``stale_after=None`` existence alone decides.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class LivenessMarker:
    """Existence-plus-heartbeat flag at a fixed path."""

    def __init__(self, path: Path, stale_after: float | None = None) -> None:
        self.path = Path(path)
        self.stale_after = stale_after

    def acquire(self) -> None:
        """Create (or refresh) the marker. Owned by the foreground app."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)
        logger.debug("Liveness marker created at %s", self.path)

    def touch(self) -> None:
        """Refresh the heartbeat timestamp, recreating the marker if it vanished."""
        try:
            os.utime(self.path)
        except FileNotFoundError:
            logger.warning("Liveness marker disappeared, recreating %s", self.path)
            self.acquire()

    def release(self) -> None:
        """Remove the marker on clean shutdown."""
        self.path.unlink(missing_ok=True)
        logger.debug("Liveness marker removed from %s", self.path)

    def age(self, now: float | None = None) -> float | None:
        """Seconds since the last heartbeat, or None when the marker is absent."""
        try:
            mtime = self.path.stat().st_mtime
        except FileNotFoundError:
            return None
        return max(0.0, (now if now is not None else time.time()) - mtime)

    def is_alive(self, now: float | None = None) -> bool:
        """Whether the foreground app currently owns firing duty.

        Args:
            now: Epoch seconds to compare against (defaults to the current time).
        """
        age = self.age(now)
        if age is None:
            return False
        if self.stale_after is not None and age > self.stale_after:
            logger.info(
                "Liveness marker is stale (last heartbeat %.0fs ago), treating foreground as gone",
                age,
            )
            return False
        return True
