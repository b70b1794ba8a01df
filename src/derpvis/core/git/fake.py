"""Fake Git implementation for testing.

FakeGit is an in-memory implementation that simulates repositories on a set of
sentinel paths, enabling fast and deterministic sync engine tests.
"""

import threading
from pathlib import Path

from derpvis.core.git.abc import Git


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    Constructor Injection:
    - All state is provided via constructor parameters
    - Calls are recorded for assertions (thread-safe, the pull pass is parallel)

    Examples:
        # Two tracked repos, one of which fails to pull
        >>> git = FakeGit(
        ...     repositories={Path("/a"), Path("/b")},
        ...     pull_failures={Path("/b"): "could not resolve host"},
        ... )
        >>> git.pull(Path("/a"), "origin")
        >>> assert git.pulled == [Path("/a")]
    """

    def __init__(
        self,
        *,
        repositories: set[Path] | None = None,
        plain_paths: set[Path] | None = None,
        remote_urls: dict[Path, str] | None = None,
        head_subjects: dict[Path, str] | None = None,
        dirty: set[Path] | None = None,
        clone_failures: dict[str, str] | None = None,
        pull_failures: dict[Path, str] | None = None,
        status_failures: dict[Path, str] | None = None,
        commit_failures: dict[Path, str] | None = None,
        push_failures: dict[Path, str] | None = None,
    ) -> None:
        """Initialize fake with predetermined repository state.

        Args:
            repositories: Paths that exist and are git repositories
            plain_paths: Paths that exist but are not git repositories
            remote_urls: Mapping of repository path to its origin URL
            head_subjects: Mapping of repository path to HEAD commit subject
            dirty: Repositories with uncommitted changes
            clone_failures: Mapping of source URL to error message for clone
            pull_failures: Mapping of repository path to error message for pull
            status_failures: Mapping of repository path to error for status
            commit_failures: Mapping of repository path to error for commit
            push_failures: Mapping of repository path to error for push
        """
        self._repositories = set(repositories or ())
        self._plain_paths = set(plain_paths or ())
        self._remote_urls = dict(remote_urls or {})
        self._head_subjects = dict(head_subjects or {})
        self._dirty = set(dirty or ())
        self._clone_failures = dict(clone_failures or {})
        self._pull_failures = dict(pull_failures or {})
        self._status_failures = dict(status_failures or {})
        self._commit_failures = dict(commit_failures or {})
        self._push_failures = dict(push_failures or {})

        self._lock = threading.Lock()
        self._cloned: list[tuple[str, Path]] = []
        self._pulled: list[Path] = []
        self._added: list[Path] = []
        self._commits: list[tuple[Path, str]] = []
        self._pushed: list[Path] = []
        self._remote_lookups: list[tuple[Path, str]] = []

    def path_exists(self, path: Path) -> bool:
        return path in self._repositories or path in self._plain_paths

    def is_git_repository(self, path: Path) -> bool:
        return path in self._repositories

    def get_remote_url(self, repo_path: Path, remote: str) -> str | None:
        with self._lock:
            self._remote_lookups.append((repo_path, remote))
        if repo_path not in self._repositories:
            return None
        return self._remote_urls.get(repo_path)

    def clone(self, source: str, dest: Path) -> None:
        if source in self._clone_failures:
            raise RuntimeError(self._clone_failures[source])
        with self._lock:
            self._cloned.append((source, dest))
            self._repositories.add(dest)
            self._remote_urls[dest] = source

    def pull(self, repo_path: Path, remote: str) -> None:
        if repo_path in self._pull_failures:
            raise RuntimeError(self._pull_failures[repo_path])
        with self._lock:
            self._pulled.append(repo_path)

    def get_head_commit_subject(self, repo_path: Path) -> str | None:
        return self._head_subjects.get(repo_path)

    def has_uncommitted_changes(self, repo_path: Path) -> bool:
        if repo_path in self._status_failures:
            raise RuntimeError(self._status_failures[repo_path])
        return repo_path in self._dirty

    def add_all(self, repo_path: Path) -> None:
        with self._lock:
            self._added.append(repo_path)

    def commit(self, repo_path: Path, message: str) -> None:
        if repo_path in self._commit_failures:
            raise RuntimeError(self._commit_failures[repo_path])
        with self._lock:
            self._commits.append((repo_path, message))
            self._dirty.discard(repo_path)

    def push(self, repo_path: Path) -> None:
        if repo_path in self._push_failures:
            raise RuntimeError(self._push_failures[repo_path])
        with self._lock:
            self._pushed.append(repo_path)

    @property
    def cloned(self) -> list[tuple[str, Path]]:
        """(source, dest) pairs passed to successful clone() calls."""
        return list(self._cloned)

    @property
    def pulled(self) -> list[Path]:
        return list(self._pulled)

    @property
    def added(self) -> list[Path]:
        return list(self._added)

    @property
    def commits(self) -> list[tuple[Path, str]]:
        return list(self._commits)

    @property
    def remote_lookups(self) -> list[tuple[Path, str]]:
        """(path, remote name) pairs passed to get_remote_url()."""
        return list(self._remote_lookups)

    @property
    def pushed(self) -> list[Path]:
        return list(self._pushed)
