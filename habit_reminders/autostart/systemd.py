"""systemd user unit autostart (Linux)."""

from __future__ import annotations

import logging
import os
from pathlib import Path
import shutil

from habit_reminders.autostart.base import (
    AutostartProvider,
    CommandRunner,
    daemon_command,
    passthrough_environment,
)
from habit_reminders.core.exceptions import AutostartError

logger = logging.getLogger(__name__)

UNIT_TEMPLATE = """\
[Unit]
Description=Habit reminder notification daemon
After=graphical-session.target

[Service]
Type=simple
ExecStart={exec_start}
Restart=on-failure
RestartSec=10
{environment}
[Install]
WantedBy=default.target
"""


def _quote(arg: str) -> str:
    if not arg or any(c in arg for c in ' \t"\\'):
        escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return arg


class SystemdUserAutostart(AutostartProvider):
    """Installs the daemon as a ``systemctl --user`` service."""

    name = "systemd"

    def __init__(
        self,
        service_name: str = "habit-reminders-daemon",
        *,
        unit_dir: Path | None = None,
        python: str | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        super().__init__(runner)
        self.service_name = service_name
        self.unit_dir = unit_dir or Path.home() / ".config" / "systemd" / "user"
        self.python = python

    @property
    def unit_name(self) -> str:
        return f"{self.service_name}.service"

    @property
    def unit_path(self) -> Path:
        return self.unit_dir / self.unit_name

    def is_supported(self) -> bool:
        return shutil.which("systemctl") is not None

    def is_installed(self) -> bool:
        return self.unit_path.exists()

    def render_unit(self) -> str:
        environment = dict(passthrough_environment())
        if hasattr(os, "getuid"):
            environment.setdefault(
                "DBUS_SESSION_BUS_ADDRESS", f"unix:path=/run/user/{os.getuid()}/bus"
            )
        lines = "".join(
            f"Environment={_quote(f'{key}={value}')}\n" for key, value in sorted(environment.items())
        )
        return UNIT_TEMPLATE.format(
            exec_start=" ".join(_quote(arg) for arg in daemon_command(self.python)),
            environment=lines,
        )

    def install(self) -> None:
        if self.is_installed():
            logger.info("systemd unit already installed at %s", self.unit_path)
            return

        try:
            self.unit_dir.mkdir(parents=True, exist_ok=True)
            self.unit_path.write_text(self.render_unit(), encoding="utf-8")
        except OSError as e:
            raise AutostartError(
                detail=f"Cannot write systemd unit: {e}",
                extra={"path": str(self.unit_path)},
            ) from e

        self.run_command(["systemctl", "--user", "daemon-reload"])
        self.run_command(["systemctl", "--user", "enable", self.unit_name])
        self.run_command(["systemctl", "--user", "start", self.unit_name])
        logger.info("systemd unit %s installed and started", self.unit_name)

    def uninstall(self) -> None:
        if not self.is_installed():
            logger.info("systemd unit %s is not installed", self.unit_name)
            return

        self.run_command(["systemctl", "--user", "disable", "--now", self.unit_name])
        self.unit_path.unlink(missing_ok=True)
        self.run_command(["systemctl", "--user", "daemon-reload"])
        logger.info("systemd unit %s removed", self.unit_name)

    def status(self) -> str:
        if not self.is_supported():
            return "unsupported"
        if not self.is_installed():
            return "not installed"
        result = self._runner(
            ["systemctl", "--user", "is-active", self.unit_name],
            check=False,
            capture_output=True,
            text=True,
        )
        return f"installed ({(result.stdout or '').strip() or 'unknown'})"
