"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands
with consistent, user-friendly error messages. All errors use red "Error:" prefix
for visual consistency.
"""

from typing import NoReturn

import click

from derpvis.cli.output import user_output


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def fail(error_message: str) -> NoReturn:
        """Output styled error and exit with status 1."""
        user_output(click.style("Error: ", fg="red") + error_message)
        raise SystemExit(1)

