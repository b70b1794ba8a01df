"""Error types raised by derpvis operations.

Registry-level errors (storage, corruption, config) are fatal to the process.
Add-time errors are fatal to the add operation only. RepositoryOperationError
subclasses are captured per repository during a sync pass and never abort
sibling repositories.
"""

from pathlib import Path


class DerpvisError(Exception):
    """Base class for all derpvis errors."""


class ConfigError(DerpvisError):
    """config.toml could not be parsed or holds an invalid value."""


class StorageReadError(DerpvisError):
    """The registry file exists but could not be read."""


class StorageWriteError(DerpvisError):
    """The registry file (or its directory) could not be written."""


class CorruptRegistry(DerpvisError):
    """The registry file does not match the expected schema."""


class MalformedEnvEntry(DerpvisError):
    """A DERPVIS_FOLDERS token could not be parsed."""

    def __init__(self, token: str, reason: str) -> None:
        super().__init__(f"Malformed DERPVIS_FOLDERS entry {token!r}: {reason}")
        self.token = token
        self.reason = reason


class PathNotFound(DerpvisError):
    """Path given to add does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Folder doesn't exist: {path}")
        self.path = path


class NoRemoteConfigured(DerpvisError):
    """Path given to add has no URL for the expected remote."""

    def __init__(self, path: Path, remote: str) -> None:
        super().__init__(f"No '{remote}' remote configured for {path}")
        self.path = path
        self.remote = remote


class NotRepositoryRoot(DerpvisError):
    """Path given to add is not the top level of a git working tree."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Not the top level of a git repository: {path}")
        self.path = path


class GitUnavailable(DerpvisError):
    """The git executable could not be started."""

    def __init__(self) -> None:
        super().__init__("git executable not found on PATH")


class RepositoryOperationError(DerpvisError):
    """A git operation failed for a single tracked repository."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class CloneFailure(RepositoryOperationError):
    pass


class PullFailure(RepositoryOperationError):
    pass


class CommitFailure(RepositoryOperationError):
    pass


class PushFailure(RepositoryOperationError):
    pass
