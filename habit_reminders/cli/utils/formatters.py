"""Output formatting utilities for CLI commands."""

from __future__ import annotations

from datetime import datetime

import click


def success(message: str) -> None:
    """Print a success message in green."""
    click.secho(f"✓ {message}", fg="green")


def error(message: str) -> None:
    """Print an error message in red."""
    click.secho(f"✗ {message}", fg="red", err=True)


def warning(message: str) -> None:
    """Print a warning message in yellow."""
    click.secho(f"⚠ {message}", fg="yellow")


def info(message: str) -> None:
    """Print an info message in blue."""
    click.secho(f"ℹ {message}", fg="blue")


def header(message: str) -> None:
    """Print a header message in cyan bold."""
    click.secho(f"\n{message}", fg="cyan", bold=True)


def format_time_until(target: datetime, now: datetime) -> str:
    """Compact relative time like "2d 3h", "4h 10m" or "5m 30s"."""
    seconds = int((target - now).total_seconds())
    if seconds <= 0:
        return "due"
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours >= 24:
        return f"{hours // 24}d {hours % 24}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m {seconds}s"


def print_table(headers: list[str], rows: list[list[str]]) -> None:
    """Print rows as left-aligned columns sized to their content."""
    widths = [
        max([len(h), *(len(row[i]) for row in rows)]) + 2 for i, h in enumerate(headers)
    ]
    click.echo()
    click.echo("".join(f"{h:<{w}}" for h, w in zip(headers, widths, strict=True)))
    click.echo("-" * sum(widths))
    for row in rows:
        click.echo("".join(f"{cell:<{w}}" for cell, w in zip(row, widths, strict=True)))
    click.echo()
