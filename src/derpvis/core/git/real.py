"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

import os
import shutil
import subprocess
from pathlib import Path

from derpvis.core.errors import GitUnavailable
from derpvis.core.git.abc import Git
from derpvis.core.subprocess import run_subprocess_with_context

# ============================================================================
# Production Implementation
# ============================================================================


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess. Every
    command is killed after `timeout` seconds so one unreachable remote cannot
    hang a sync pass.
    """

    def __init__(self, *, timeout: float | None = None) -> None:
        self._timeout = timeout

    def path_exists(self, path: Path) -> bool:
        return path.exists()

    def is_git_repository(self, path: Path) -> bool:
        if not path.is_dir():
            return False
        result = _query(["git", "rev-parse", "--show-toplevel"], cwd=path)
        if result.returncode != 0:
            return False
        return Path(result.stdout.strip()).resolve() == path.resolve()

    def get_remote_url(self, repo_path: Path, remote: str) -> str | None:
        result = _query(["git", "remote", "get-url", remote], cwd=repo_path)
        if result.returncode != 0:
            return None
        url = result.stdout.strip()
        return url or None

    def clone(self, source: str, dest: Path) -> None:
        run_subprocess_with_context(
            ["git", "clone", source, str(dest)],
            operation_context=f"clone '{source}' into {dest}",
            timeout=self._timeout,
            env=_non_interactive_env(),
        )

    def pull(self, repo_path: Path, remote: str) -> None:
        run_subprocess_with_context(
            ["git", "pull", remote],
            operation_context=f"pull '{remote}' in {repo_path}",
            cwd=repo_path,
            timeout=self._timeout,
            env=_non_interactive_env(),
        )

    def get_head_commit_subject(self, repo_path: Path) -> str | None:
        result = _query(["git", "log", "-1", "--format=%s"], cwd=repo_path)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def has_uncommitted_changes(self, repo_path: Path) -> bool:
        result = run_subprocess_with_context(
            ["git", "status", "--porcelain"],
            operation_context=f"read status of {repo_path}",
            cwd=repo_path,
            timeout=self._timeout,
        )
        return bool(result.stdout.strip())

    def add_all(self, repo_path: Path) -> None:
        run_subprocess_with_context(
            ["git", "add", "-A"],
            operation_context=f"stage changes in {repo_path}",
            cwd=repo_path,
            timeout=self._timeout,
        )

    def commit(self, repo_path: Path, message: str) -> None:
        run_subprocess_with_context(
            ["git", "commit", "-m", message],
            operation_context=f"commit in {repo_path}",
            cwd=repo_path,
            timeout=self._timeout,
        )

    def push(self, repo_path: Path) -> None:
        # Push runs in the interactive pass, so credential prompts stay enabled
        run_subprocess_with_context(
            ["git", "push"],
            operation_context=f"push {repo_path}",
            cwd=repo_path,
            timeout=self._timeout,
        )


def _query(cmd: list[str], *, cwd: Path) -> subprocess.CompletedProcess[str]:
    """Run a read-only git query whose exit code is the answer.

    Raises:
        GitUnavailable: If the git executable cannot be found
    """
    try:
        return subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, check=False)
    except FileNotFoundError as e:
        # Also raised for a vanished cwd; only a missing binary is reported as such
        if shutil.which(cmd[0]) is None:
            raise GitUnavailable() from e
        raise


def _non_interactive_env() -> dict[str, str]:
    """Environment for parallel network operations: fail instead of prompting."""
    env = dict(os.environ)
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env
