"""Autostart provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
import logging
import os
import subprocess
import sys

from habit_reminders.core.exceptions import AutostartError

logger = logging.getLogger(__name__)

CommandRunner = Callable[..., subprocess.CompletedProcess[str]]


def daemon_command(python: str | None = None) -> list[str]:
    """Command line that starts the background daemon."""
    return [python or sys.executable, "-m", "habit_reminders", "daemon", "run"]


def passthrough_environment() -> dict[str, str]:
    """Environment overrides the daemon must share with the installing app."""
    return {
        name: value
        for name, value in os.environ.items()
        if name.startswith(("REMINDERS_", "DAEMON_", "LOG_")) and value
    }


class AutostartProvider(ABC):
    """Registers the daemon to start at user login.

    Providers are capability checked: ``is_supported()`` says whether this
    host can use the mechanism at all.
    """

    name: str = "none"

    def __init__(self, runner: CommandRunner | None = None) -> None:
        self._runner = runner or subprocess.run

    @abstractmethod
    def is_supported(self) -> bool:
        """Whether the mechanism exists on this host."""
        ...

    @abstractmethod
    def is_installed(self) -> bool:
        """Whether the daemon is already registered."""
        ...

    @abstractmethod
    def install(self) -> None:
        """Register and start the daemon.

        Raises:
            AutostartError: If registration failed.
        """
        ...

    @abstractmethod
    def uninstall(self) -> None:
        """Stop and unregister the daemon.

        Raises:
            AutostartError: If unregistration failed.
        """
        ...

    def status(self) -> str:
        """Short human-readable state."""
        if not self.is_supported():
            return "unsupported"
        return "installed" if self.is_installed() else "not installed"

    def run_command(self, args: Sequence[str]) -> subprocess.CompletedProcess[str]:
        """Run a service manager command, raising AutostartError on failure."""
        logger.debug("Running %s", " ".join(args))
        try:
            return self._runner(list(args), check=True, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise AutostartError(
                detail=f"Command not found: {args[0]}",
                extra={"provider": self.name},
            ) from e
        except subprocess.CalledProcessError as e:
            raise AutostartError(
                detail=f"{' '.join(args)} failed with exit status {e.returncode}: {(e.stderr or '').strip()}",
                extra={"provider": self.name, "returncode": e.returncode},
            ) from e


class NoAutostart(AutostartProvider):
    """Fallback for hosts without a supported mechanism.

    Reminders then only fire while the application is running.
    """

    name = "none"

    def is_supported(self) -> bool:
        return False

    def is_installed(self) -> bool:
        return False

    def install(self) -> None:
        raise AutostartError(detail="No autostart mechanism available on this platform")

    def uninstall(self) -> None:
        logger.debug("No autostart mechanism, nothing to uninstall")
