"""Reminder store commands.

This module provides CLI commands for the persisted reminder list:
- List stored reminders
- Show the weekly triggers the daemon schedules and their next run
- Sync a habit list into the store
"""

from __future__ import annotations

from datetime import datetime
import json
from pathlib import Path
import sys

import click
from pydantic import TypeAdapter, ValidationError

from habit_reminders.cli.utils import (
    error,
    format_time_until,
    header,
    info,
    print_table,
    success,
)
from habit_reminders.core.settings import get_reminder_settings
from habit_reminders.daemon.scheduler import job_ids_for
from habit_reminders.features.reminders.models import Habit, to_reminder_configs
from habit_reminders.features.reminders.recurrence import WEEKDAYS_BY_NUMBER, expand_triggers
from habit_reminders.features.reminders.store import ReminderConfigStore
from habit_reminders.foreground.bridge import ConfigSyncBridge, HostBridge, SyncConfig

_habit_list_adapter = TypeAdapter(list[Habit])

FORMAT_OPTION = click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)


def _store() -> ReminderConfigStore:
    return ReminderConfigStore(get_reminder_settings().config_path)


@click.group(name="reminders")
def reminders() -> None:
    """Persisted reminder list commands."""


@reminders.command(name="list")
@FORMAT_OPTION
def list_reminders(output_format: str) -> None:
    """List the reminders in the config store."""
    store = _store()
    configs = store.read()

    if output_format == "json":
        click.echo(json.dumps([c.to_document() for c in configs], indent=2, ensure_ascii=False))
        return

    header(f"Reminders in {store.path}")
    if not configs:
        info("No reminders configured")
        return

    rows = [
        [
            c.id,
            c.title,
            ",".join(WEEKDAYS_BY_NUMBER[d].value for d in sorted(c.enabled_days)) or "-",
            ", ".join(c.times) or "-",
            c.sound or "-",
        ]
        for c in configs
    ]
    print_table(["ID", "Title", "Days", "Times", "Sound"], rows)
    success(f"Total: {len(configs)} reminders")


@reminders.command(name="jobs")
@FORMAT_OPTION
def list_jobs(output_format: str) -> None:
    """List the weekly jobs the daemon builds, with their next run times."""
    triggers = expand_triggers(_store().read())
    now = datetime.now()

    jobs = []
    for job_id, trigger in zip(job_ids_for(triggers), triggers, strict=True):
        next_run = trigger.next_occurrence(now)
        jobs.append(
            {
                "id": job_id,
                "title": trigger.title,
                "schedule": trigger.describe(),
                "rrule": trigger.to_rrule_string(),
                "next_run_time": next_run.isoformat() if next_run else None,
            }
        )

    if output_format == "json":
        click.echo(json.dumps(jobs, indent=2, ensure_ascii=False))
        return

    header("Scheduled Reminder Jobs")
    if not jobs:
        info("No reminder jobs would be scheduled")
        return

    rows = []
    for job in jobs:
        next_run = job["next_run_time"]
        if next_run:
            next_display = f"{next_run[:16]} ({format_time_until(datetime.fromisoformat(next_run), now)})"
        else:
            next_display = "-"
        rows.append([job["id"], job["title"], job["schedule"], next_display])

    print_table(["ID", "Title", "Schedule", "Next Run"], rows)
    success(f"Total: {len(jobs)} scheduled jobs")


@reminders.command(name="sync")
@click.argument("habits_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def sync(habits_file: Path) -> None:
    """Write the reminders of a habit list into the config store.

    HABITS_FILE is a JSON array of habits using the UI's camelCase keys
    (notificationEnabled, notificationDays, notificationTimes...).

    \b
    Examples:
      habit-reminders reminders sync habits.json
    """
    try:
        habits = _habit_list_adapter.validate_json(habits_file.read_bytes())
    except ValidationError as e:
        error(f"Invalid habit file: {e.error_count()} errors")
        for err in e.errors(include_url=False):
            click.echo(f"  {'.'.join(str(p) for p in err['loc'])}: {err['msg']}", err=True)
        sys.exit(1)

    bridge = HostBridge(ConfigSyncBridge(_store()))
    message = SyncConfig(reminders=to_reminder_configs(habits))

    if not bridge.dispatch(message):
        error("Failed to write the reminder config, see the log for details")
        sys.exit(1)

    success(f"Synced {len(message.reminders)} of {len(habits)} habits")
