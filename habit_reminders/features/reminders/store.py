"""Reminder config store: the shared JSON document both schedulers read.

The document is a JSON array of reminders and is always replaced as a whole.
Writes go to a temporary file in the same directory which is then renamed
over the target, so a reader (the daemon reacting to a file-change event)
sees either the old or the new document, never a partial one.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections import Counter
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from habit_reminders.core.exceptions import ConfigReadError, ConfigWriteError
from habit_reminders.features.reminders.models import ReminderConfig

logger = logging.getLogger(__name__)


class ReminderConfigStore:
    """Read and atomically replace the persisted reminder list.

    Example:
        store = ReminderConfigStore(settings.config_path)
        store.write([ReminderConfig(id="c1", title="Stretch", days={1: True}, times=["09:00"])])
        store.read()  # [ReminderConfig(id='c1', ...)]
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    @property
    def directory(self) -> Path:
        return self.path.parent

    def load(self) -> list[ReminderConfig]:
        """Strictly read the document.

        Entries that fail validation are skipped with a warning so one bad
        reminder does not silence all the others.

        Returns:
            The reminders in file order.

        Raises:
            ConfigReadError: If the file is missing, unreadable, not JSON, or
                not a JSON array.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ConfigReadError(
                detail="Reminder config file does not exist",
                type="config-missing",
                extra={"path": str(self.path)},
            ) from None
        except OSError as e:
            raise ConfigReadError(
                detail=f"Reminder config file is unreadable: {e}",
                extra={"path": str(self.path)},
            ) from e

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigReadError(
                detail=f"Reminder config file is not valid JSON: {e}",
                type="config-malformed",
                extra={"path": str(self.path)},
            ) from e

        if not isinstance(document, list):
            raise ConfigReadError(
                detail="Reminder config document is not a JSON array",
                type="config-malformed",
                extra={"path": str(self.path), "found": type(document).__name__},
            )

        return self._parse_entries(document)

    def read(self) -> list[ReminderConfig]:
        """Read the document, degrading to an empty list on any read failure."""
        try:
            return self.load()
        except ConfigReadError as e:
            if e.type == "config-missing":
                logger.debug("No reminder config at %s yet", self.path)
            else:
                logger.error("Failed to read reminder config: %s", e.detail, extra=e.extra)
            return []

    def write(self, configs: Sequence[ReminderConfig]) -> None:
        """Replace the whole document with ``configs``.

        Raises:
            ConfigWriteError: On duplicate reminder ids or any filesystem error.
        """
        counts = Counter(c.id for c in configs)
        duplicates = sorted(reminder_id for reminder_id, n in counts.items() if n > 1)
        if duplicates:
            raise ConfigWriteError(
                detail=f"Duplicate reminder ids: {', '.join(duplicates)}",
                type="duplicate-reminder-id",
                extra={"ids": duplicates},
            )

        payload = json.dumps([c.to_document() for c in configs], indent=2, ensure_ascii=False)

        tmp_name: str | None = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.directory,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise ConfigWriteError(
                detail=f"Failed to write reminder config: {e}",
                extra={"path": str(self.path)},
            ) from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

        logger.debug("Wrote %d reminders to %s", len(configs), self.path)

    def _parse_entries(self, document: list[Any]) -> list[ReminderConfig]:
        configs: list[ReminderConfig] = []
        for index, entry in enumerate(document):
            try:
                configs.append(ReminderConfig.model_validate(entry))
            except ValidationError as e:
                logger.warning(
                    "Skipping invalid reminder entry %d in %s: %s",
                    index,
                    self.path,
                    e.errors(include_url=False),
                )
        return configs
