"""Messages between the host UI layer and the reminder subsystem.

Two messages exist:

- ``SyncConfig``: the foreground sends the full reminder list, which is
  persisted to the config store for the daemon.
- ``NotificationClicked``: the host is told a reminder notification was
  clicked so it can surface its window on that reminder.

Both are fire-and-forget: handlers log their failures instead of raising
them back into the UI layer.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter

from habit_reminders.core.exceptions import ConfigWriteError
from habit_reminders.features.reminders.models import Habit, ReminderConfig, to_reminder_configs
from habit_reminders.features.reminders.store import ReminderConfigStore

logger = logging.getLogger(__name__)


class SyncConfig(BaseModel):
    """Replace the persisted reminder list."""

    type: Literal["sync-config"] = "sync-config"
    reminders: list[ReminderConfig] = Field(default_factory=list)


class NotificationClicked(BaseModel):
    """A reminder notification was clicked by the user."""

    type: Literal["notification-clicked"] = "notification-clicked"
    reminder_id: str = Field(..., min_length=1)


HostMessage = Annotated[SyncConfig | NotificationClicked, Field(discriminator="type")]

_host_message_adapter: TypeAdapter[SyncConfig | NotificationClicked] = TypeAdapter(HostMessage)


class ConfigSyncBridge:
    """Persists the reminder list so the daemon can pick it up."""

    def __init__(self, store: ReminderConfigStore) -> None:
        self.store = store

    def push(self, habits: Sequence[Habit]) -> bool:
        """Persist the reminders derived from ``habits``.

        Only habits with notifications on, at least one time and at least one
        enabled weekday end up in the file.
        """
        return self.sync(SyncConfig(reminders=to_reminder_configs(habits)))

    def sync(self, message: SyncConfig) -> bool:
        try:
            self.store.write(message.reminders)
        except ConfigWriteError as e:
            logger.error("Failed to sync reminder config: %s", e.detail, extra=e.extra)
            return False

        logger.info("Reminder config synced to %s", self.store.path, extra={"count": len(message.reminders)})
        return True


class HostBridge:
    """Dispatches host messages to their handlers.

    Accepts either message models or their plain dict form as received
    from the UI layer.
    """

    def __init__(
        self,
        sync_bridge: ConfigSyncBridge,
        on_notification_clicked: Callable[[str], None] | None = None,
    ) -> None:
        self.sync_bridge = sync_bridge
        self.on_notification_clicked = on_notification_clicked

    def dispatch(self, message: SyncConfig | NotificationClicked | dict[str, Any]) -> bool:
        """Handle one message.

        Returns:
            True when the message was handled successfully.

        Raises:
            pydantic.ValidationError: If a dict message has no valid shape.
        """
        if isinstance(message, dict):
            message = _host_message_adapter.validate_python(message)

        if isinstance(message, SyncConfig):
            return self.sync_bridge.sync(message)

        return self._handle_click(message)

    def _handle_click(self, message: NotificationClicked) -> bool:
        if self.on_notification_clicked is None:
            logger.debug("No handler for clicked reminder %s", message.reminder_id)
            return False
        try:
            self.on_notification_clicked(message.reminder_id)
        except Exception:
            logger.exception("Failed to handle notification click for %s", message.reminder_id)
            return False
        return True
