"""Add and remove operations on the tracked folder registry."""

import logging
import os
from pathlib import Path

from derpvis.core.context import DerpvisContext
from derpvis.core.errors import NoRemoteConfigured, NotRepositoryRoot, PathNotFound
from derpvis.core.registry import RepositoryEntry

logger = logging.getLogger(__name__)


def resolve_add_path(ctx: DerpvisContext, path: Path | None) -> Path:
    """Explicit path wins over the current directory.

    Relative paths are made absolute against ctx.cwd and normalized lexically,
    so symlinks are kept as the user typed them.
    """
    target = path.expanduser() if path is not None else ctx.cwd
    if not target.is_absolute():
        target = ctx.cwd / target
    return Path(os.path.normpath(target))


def add_entry(ctx: DerpvisContext, path: Path | None) -> tuple[RepositoryEntry, bool]:
    """Track a local repository, discovering its remote URL.

    Args:
        ctx: Application context
        path: Folder to add, or None to add ctx.cwd

    Returns:
        Tuple of (entry, created). created is False when the path was already
        tracked and only its source was refreshed.

    Raises:
        PathNotFound: If the folder does not exist
        NotRepositoryRoot: If the folder is not the top level of a git repository
        NoRemoteConfigured: If the folder has no URL for the configured remote
        StorageWriteError: If the registry cannot be saved
    """
    target = resolve_add_path(ctx, path)
    if not ctx.git.path_exists(target):
        raise PathNotFound(target)
    if not ctx.git.is_git_repository(target):
        raise NotRepositoryRoot(target)

    remote = ctx.config.remote
    source = ctx.git.get_remote_url(target, remote)
    if source is None:
        raise NoRemoteConfigured(target, remote)

    entry = RepositoryEntry(path=target, source=source)
    created = ctx.registry.upsert(entry)
    ctx.save_registry()
    logger.debug("add %s (%s) created=%s", target, source, created)
    return entry, created


def remove_entry(ctx: DerpvisContext, display_index: int) -> RepositoryEntry | None:
    """Stop tracking the entry at a 1-based display index.

    Returns:
        The removed entry, or None if the index is out of range (the registry
        is left untouched and nothing is written)

    Raises:
        StorageWriteError: If the registry cannot be saved
    """
    removed = ctx.registry.remove_at(display_index)
    if removed is None:
        return None
    ctx.save_registry()
    return removed
