"""Sync engine: bring every tracked repository up to date.

Two passes are supported:

- Pull pass: one task per repository on a bounded thread pool. A missing
  folder is cloned, an existing repository is pulled. Tasks are independent;
  each returns a SyncResult and any exception escaping a task is captured at
  the join barrier, so one broken repository never affects the others.
- Push pass: sequential, because committing prompts the operator for a
  message. Clean worktrees are skipped without prompting.

Neither pass mutates the registry.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Literal

from derpvis.core.context import DerpvisContext
from derpvis.core.errors import (
    CloneFailure,
    CommitFailure,
    DerpvisError,
    PullFailure,
    PushFailure,
    RepositoryOperationError,
)
from derpvis.core.registry import RepositoryEntry

logger = logging.getLogger(__name__)

SyncAction = Literal["clone", "pull", "update", "push", "skip"]


@dataclass(frozen=True)
class SyncResult:
    """Outcome of syncing one repository."""

    entry: RepositoryEntry
    action: SyncAction
    error: DerpvisError | None = None
    detail: str | None = None  # HEAD subject after pull, commit message after push

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SyncSummary:
    """All results of a sync pass, in completion order."""

    results: list[SyncResult]

    @property
    def succeeded(self) -> list[SyncResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[SyncResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


# ============================================================================
# Pull pass
# ============================================================================


def clone_entry(ctx: DerpvisContext, entry: RepositoryEntry) -> SyncResult:
    """Clone entry.source into the missing entry.path."""
    if not entry.source:
        error = CloneFailure(entry.path, "no source recorded, cannot clone")
        return SyncResult(entry=entry, action="clone", error=error)

    try:
        ctx.git.clone(entry.source, entry.path)
    except RuntimeError as e:
        return SyncResult(entry=entry, action="clone", error=CloneFailure(entry.path, str(e)))

    return SyncResult(entry=entry, action="clone", detail=f"cloned from {entry.source}")


def pull_entry(ctx: DerpvisContext, entry: RepositoryEntry) -> SyncResult:
    """Pull the configured remote into an existing repository."""
    if not ctx.git.is_git_repository(entry.path):
        error = PullFailure(entry.path, "folder exists but is not a git repository")
        return SyncResult(entry=entry, action="pull", error=error)

    try:
        ctx.git.pull(entry.path, ctx.config.remote)
    except RuntimeError as e:
        return SyncResult(entry=entry, action="pull", error=PullFailure(entry.path, str(e)))

    subject = ctx.git.get_head_commit_subject(entry.path)
    return SyncResult(entry=entry, action="pull", detail=subject)


def update_entry(ctx: DerpvisContext, entry: RepositoryEntry) -> SyncResult:
    """Clone if the folder is missing, otherwise pull."""
    if not ctx.git.path_exists(entry.path):
        ctx.feedback.info(f"Folder missing: {entry.path}")
        return clone_entry(ctx, entry)
    return pull_entry(ctx, entry)


def pull_all(ctx: DerpvisContext) -> SyncSummary:
    """Update every tracked repository concurrently.

    All tasks are submitted together and joined before returning. Results are
    reported as each task completes.
    """
    entries = list(ctx.registry)
    if not entries:
        return SyncSummary(results=[])

    max_workers = min(ctx.config.max_workers, len(entries))
    logger.debug("Syncing %d repositories with %d workers", len(entries), max_workers)

    results: list[SyncResult] = []
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="derpvis") as executor:
        futures: dict[Future[SyncResult], RepositoryEntry] = {
            executor.submit(update_entry, ctx, entry): entry for entry in entries
        }
        for future in as_completed(futures):
            result = _collect(future, futures[future])
            report_result(ctx, result)
            results.append(result)

    return SyncSummary(results=results)


def _collect(future: Future[SyncResult], entry: RepositoryEntry) -> SyncResult:
    """Turn a finished task into a result, capturing anything it raised.

    A task that raised is recorded as an "update"; it may have been cloning
    or pulling.
    """
    # Acceptable exception use: the join barrier isolates tasks from each other
    try:
        return future.result()
    except Exception as e:
        logger.debug("Task for %s raised", entry.path, exc_info=True)
        error = RepositoryOperationError(entry.path, f"{type(e).__name__}: {e}")
        return SyncResult(entry=entry, action="update", error=error)


# ============================================================================
# Push pass
# ============================================================================


def push_entry(ctx: DerpvisContext, entry: RepositoryEntry) -> SyncResult:
    """Commit and push local changes of one repository.

    Clean worktrees are skipped without prompting. A failed stage or commit
    stops before pushing.
    """
    path = entry.path
    if not ctx.git.path_exists(path) or not ctx.git.is_git_repository(path):
        error = PushFailure(path, "folder is missing or not a git repository")
        return SyncResult(entry=entry, action="push", error=error)

    try:
        dirty = ctx.git.has_uncommitted_changes(path)
    except RuntimeError as e:
        return SyncResult(entry=entry, action="push", error=PushFailure(path, str(e)))

    if not dirty:
        logger.debug("%s is clean, nothing to push", path)
        return SyncResult(entry=entry, action="skip")

    try:
        ctx.git.add_all(path)
    except RuntimeError as e:
        return SyncResult(entry=entry, action="push", error=CommitFailure(path, str(e)))

    message = ctx.user_input.prompt_commit_message(path)

    try:
        ctx.git.commit(path, message)
    except RuntimeError as e:
        return SyncResult(entry=entry, action="push", error=CommitFailure(path, str(e)))

    try:
        ctx.git.push(path)
    except RuntimeError as e:
        return SyncResult(entry=entry, action="push", error=PushFailure(path, str(e)))

    return SyncResult(entry=entry, action="push", detail=message)


def push_all(ctx: DerpvisContext) -> SyncSummary:
    """Commit and push every dirty tracked repository, one at a time."""
    results: list[SyncResult] = []
    for entry in ctx.registry:
        result = push_entry(ctx, entry)
        report_result(ctx, result)
        results.append(result)
    return SyncSummary(results=results)


# ============================================================================
# Reporting
# ============================================================================


def report_result(ctx: DerpvisContext, result: SyncResult) -> None:
    """Print one line for a finished repository: path plus outcome."""
    path = result.entry.path
    if result.error is not None:
        ctx.feedback.error(f"{path}: {result.error}")
        return
    if result.action == "skip":
        return
    if result.action == "push":
        ctx.feedback.success(f"{path}: pushed '{result.detail}'")
        return
    ctx.feedback.success(f"{path}: {result.detail or result.action}")


def format_summary(summary: SyncSummary) -> str:
    total = len(summary.results)
    failed = len(summary.failed)
    if failed == 0:
        return f"✓ {total} repositories synced"
    return f"{total - failed} of {total} repositories synced, {failed} failed"
