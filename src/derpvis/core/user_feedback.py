"""User-facing diagnostic output and interactive input."""

import threading
from abc import ABC, abstractmethod
from pathlib import Path

import click

from derpvis.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing diagnostic output.

    Sync tasks report through ctx.feedback from worker threads, so
    implementations must be safe to call concurrently.

    Usage:
        ctx.feedback.info("Folder missing: /src/foo")
        ctx.feedback.success("/src/foo: Fix typo")
        ctx.feedback.error("/src/bar: could not resolve host")
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Show warning message."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message."""


class InteractiveFeedback(UserFeedback):
    """Feedback written to stderr, one whole line per call."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def info(self, message: str) -> None:
        self._emit(message)

    def success(self, message: str) -> None:
        self._emit(click.style(message, fg="green"))

    def warning(self, message: str) -> None:
        self._emit(click.style(message, fg="yellow"))

    def error(self, message: str) -> None:
        self._emit(click.style(message, fg="red"))

    def _emit(self, message: str) -> None:
        with self._lock:
            user_output(message)


class UserInput(ABC):
    """Interactive input from the operator."""

    @abstractmethod
    def prompt_commit_message(self, repo_path: Path) -> str:
        """Ask for a commit message, re-prompting until it is non-blank.

        Returns:
            The stripped, non-empty commit message

        Raises:
            click.Abort: If input ends before a message is given
        """


class InteractiveUserInput(UserInput):
    """Prompts on the terminal through click."""

    def prompt_commit_message(self, repo_path: Path) -> str:
        while True:
            message = click.prompt(
                f"Enter commit message for {repo_path}", prompt_suffix=": ", err=True
            ).strip()
            if message:
                return message
