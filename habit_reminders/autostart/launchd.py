"""LaunchAgent autostart (macOS)."""

from __future__ import annotations

import logging
from pathlib import Path
import plistlib
import shutil
from typing import Any

from habit_reminders.autostart.base import (
    AutostartProvider,
    CommandRunner,
    daemon_command,
    passthrough_environment,
)
from habit_reminders.core.exceptions import AutostartError

logger = logging.getLogger(__name__)


class LaunchAgentAutostart(AutostartProvider):
    """Installs the daemon as a per-user launchd agent."""

    name = "launchd"

    def __init__(
        self,
        service_name: str = "habit-reminders-daemon",
        *,
        agents_dir: Path | None = None,
        python: str | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        super().__init__(runner)
        self.label = f"local.{service_name}"
        self.agents_dir = agents_dir or Path.home() / "Library" / "LaunchAgents"
        self.python = python

    @property
    def plist_path(self) -> Path:
        return self.agents_dir / f"{self.label}.plist"

    def is_supported(self) -> bool:
        return shutil.which("launchctl") is not None

    def is_installed(self) -> bool:
        return self.plist_path.exists()

    def build_plist(self) -> dict[str, Any]:
        plist: dict[str, Any] = {
            "Label": self.label,
            "ProgramArguments": daemon_command(self.python),
            "RunAtLoad": True,
            # Restart only after a crash, like systemd's Restart=on-failure
            "KeepAlive": {"SuccessfulExit": False},
            "ThrottleInterval": 10,
        }
        environment = passthrough_environment()
        if environment:
            plist["EnvironmentVariables"] = environment
        return plist

    def install(self) -> None:
        if self.is_installed():
            logger.info("LaunchAgent already installed at %s", self.plist_path)
            return

        try:
            self.agents_dir.mkdir(parents=True, exist_ok=True)
            with self.plist_path.open("wb") as fh:
                plistlib.dump(self.build_plist(), fh)
        except OSError as e:
            raise AutostartError(
                detail=f"Cannot write LaunchAgent plist: {e}",
                extra={"path": str(self.plist_path)},
            ) from e

        self.run_command(["launchctl", "load", "-w", str(self.plist_path)])
        logger.info("LaunchAgent %s installed and loaded", self.label)

    def uninstall(self) -> None:
        if not self.is_installed():
            logger.info("LaunchAgent %s is not installed", self.label)
            return

        self.run_command(["launchctl", "unload", "-w", str(self.plist_path)])
        self.plist_path.unlink(missing_ok=True)
        logger.info("LaunchAgent %s removed", self.label)
