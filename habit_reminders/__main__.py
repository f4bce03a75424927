"""Allow ``python -m habit_reminders`` (used by the autostart units)."""

from habit_reminders.cli.main import main

main()
