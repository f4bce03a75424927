"""Desktop notification delivery.

The OS notification renderer and sound playback are collaborators behind
two small protocols. ``PlyerNotifier`` is the default renderer; sound is
silent unless the host application injects a player.
"""

from __future__ import annotations

import logging
from typing import Protocol

from plyer import notification as plyer_notification

from habit_reminders.infra.logging import log_context

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Shows a system notification."""

    def notify(self, title: str, message: str, *, reminder_id: str | None = None) -> None: ...


class SoundPlayer(Protocol):
    """Plays a named reminder sound at a volume between 1 and 100."""

    def play(self, sound: str, volume: int) -> None: ...


class PlyerNotifier:
    """Notifier backed by plyer (libnotify/D-Bus, Windows toast, macOS)."""

    def __init__(self, app_name: str, timeout: int = 10, app_icon: str = "") -> None:
        self.app_name = app_name
        self.timeout = timeout
        self.app_icon = app_icon

    def notify(self, title: str, message: str, *, reminder_id: str | None = None) -> None:
        plyer_notification.notify(
            title=title,
            message=message,
            app_name=self.app_name,
            app_icon=self.app_icon,
            timeout=self.timeout,
        )


class SilentSoundPlayer:
    def play(self, sound: str, volume: int) -> None:
        logger.debug("No sound player configured, skipping %s", sound)


def reminder_message(title: str) -> str:
    return f"Habit Reminder: {title}"


class ReminderDelivery:
    """Plays the reminder sound and shows the notification.

    Shared by the foreground scheduler and the daemon so both deliver the
    same way; only the decision whether to deliver differs between them.
    """

    def __init__(
        self,
        notifier: Notifier,
        sound_player: SoundPlayer | None = None,
        *,
        app_name: str = "Habit Reminders",
        volume: int = 100,
    ) -> None:
        self.notifier = notifier
        self.sound_player = sound_player or SilentSoundPlayer()
        self.app_name = app_name
        self.volume = volume

    def deliver(self, reminder_id: str, title: str, sound: str | None = None) -> bool:
        """Deliver one reminder.

        Sound problems never stop the notification. A failing notifier is
        logged and reported as ``False``; nothing is retried.

        Returns:
            True when the notification was handed to the renderer.
        """
        with log_context(reminder_id=reminder_id):
            if sound and self.volume > 0:
                try:
                    self.sound_player.play(sound, self.volume)
                except Exception:
                    logger.exception("Failed to play reminder sound %s", sound)

            try:
                self.notifier.notify(self.app_name, reminder_message(title), reminder_id=reminder_id)
            except Exception:
                logger.exception("Failed to show reminder notification")
                return False

            logger.info("Reminder notification shown: %s", title)
            return True
