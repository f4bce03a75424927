"""Configuration management commands."""

import json
import sys
from typing import Any

import click
from pydantic import ValidationError
import yaml

from habit_reminders.cli.utils import error, info, success
from habit_reminders.core.settings import (
    get_daemon_settings,
    get_logging_settings,
    get_reminder_settings,
)


@click.group(name="config")
def config() -> None:
    """Configuration management commands."""


@config.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml", "table"]),
    default="table",
    help="Output format",
)
def show(output_format: str) -> None:
    """Display the effective settings (env, .env and conf/ YAML applied)."""
    info("Loading configuration...")

    try:
        config_dict: dict[str, dict[str, Any]] = {
            "reminders": get_reminder_settings().model_dump(mode="json"),
            "daemon": get_daemon_settings().model_dump(mode="json"),
            "logging": get_logging_settings().model_dump(mode="json"),
        }
    except ValidationError as e:
        error(f"Invalid configuration: {e}")
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(config_dict, indent=2))

    elif output_format == "yaml":
        click.echo(yaml.safe_dump(config_dict, default_flow_style=False, sort_keys=False))

    else:  # table format
        click.echo("\n" + "=" * 80)
        click.echo("CONFIGURATION SETTINGS")
        click.echo("=" * 80)

        for section, values in config_dict.items():
            click.echo(f"\n[{section.upper()}]")
            for key, value in values.items():
                click.echo(f"  {key:30} = {value}")

        click.echo("\n" + "=" * 80)

    success("Configuration loaded successfully!")
