"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
sync engine testable without touching the network.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit: In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from pathlib import Path

# ============================================================================
# Abstract Interface
# ============================================================================


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    Mutating operations raise RuntimeError with command details on failure.
    """

    @abstractmethod
    def path_exists(self, path: Path) -> bool:
        """Check if a path exists on disk."""
        ...

    @abstractmethod
    def is_git_repository(self, path: Path) -> bool:
        """Check if path is the top level of a git working tree."""
        ...

    @abstractmethod
    def get_remote_url(self, repo_path: Path, remote: str) -> str | None:
        """Get the URL of a remote.

        Returns:
            The remote URL, or None if the remote is not configured
            (or path is not a repository)
        """
        ...

    @abstractmethod
    def clone(self, source: str, dest: Path) -> None:
        """Clone source into dest.

        Raises:
            RuntimeError: If git clone fails
        """
        ...

    @abstractmethod
    def pull(self, repo_path: Path, remote: str) -> None:
        """Pull the current branch from remote.

        Raises:
            RuntimeError: If git pull fails
        """
        ...

    @abstractmethod
    def get_head_commit_subject(self, repo_path: Path) -> str | None:
        """Get the subject line of the HEAD commit, or None if there is none."""
        ...

    @abstractmethod
    def has_uncommitted_changes(self, repo_path: Path) -> bool:
        """Check if the worktree has staged, unstaged or untracked changes.

        Raises:
            RuntimeError: If status cannot be read
        """
        ...

    @abstractmethod
    def add_all(self, repo_path: Path) -> None:
        """Stage every change in the worktree, including untracked files.

        Raises:
            RuntimeError: If git add fails
        """
        ...

    @abstractmethod
    def commit(self, repo_path: Path, message: str) -> None:
        """Commit staged changes with message.

        Raises:
            RuntimeError: If git commit fails
        """
        ...

    @abstractmethod
    def push(self, repo_path: Path) -> None:
        """Push the current branch to its default remote.

        Raises:
            RuntimeError: If git push fails
        """
        ...
