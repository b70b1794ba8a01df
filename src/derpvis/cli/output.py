"""Output utilities for CLI commands with clear intent."""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True) -> None:
    """Emit a message meant for the user (stderr).

    Keeps stdout free for machine-readable output such as `--list`.
    """
    click.echo(message, nl=nl, err=True)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Emit data meant for stdout (pipes, scripts)."""
    click.echo(message, nl=nl)
