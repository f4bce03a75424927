"""Main CLI entry point for habit-reminders."""

import click

from habit_reminders import __version__
from habit_reminders.cli.commands import config, daemon, reminders
from habit_reminders.infra.logging.config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="habit-reminders")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Habit Reminders - scheduled desktop notifications for habits.

    \b
    Command Groups:
      daemon     Background daemon and its autostart registration
      reminders  Persisted reminder list
      config     Configuration management

    \b
    Quick Start:
      habit-reminders daemon install     # Start the daemon at login
      habit-reminders reminders jobs     # Show upcoming reminders
      habit-reminders daemon run         # Run the daemon in this terminal
    """
    ctx.ensure_object(dict)


cli.add_command(daemon.daemon)
cli.add_command(reminders.reminders)
cli.add_command(config.config)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
