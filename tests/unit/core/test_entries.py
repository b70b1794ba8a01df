"""Tests for add/remove operations."""

from pathlib import Path

import pytest

from derpvis.core.config import DerpvisConfig
from derpvis.core.context import DerpvisContext
from derpvis.core.entries import add_entry, remove_entry, resolve_add_path
from derpvis.core.errors import NoRemoteConfigured, NotRepositoryRoot, PathNotFound
from derpvis.core.git.fake import FakeGit
from derpvis.core.registry import Registry, RepositoryEntry
from derpvis.core.registry_store import FakeRegistryStore


def test_resolve_add_path_prefers_explicit_path() -> None:
    ctx = DerpvisContext.for_test(cwd=Path("/home/me/work"))

    assert resolve_add_path(ctx, Path("/src/a")) == Path("/src/a")
    assert resolve_add_path(ctx, None) == Path("/home/me/work")


def test_resolve_add_path_makes_relative_paths_absolute() -> None:
    ctx = DerpvisContext.for_test(cwd=Path("/home/me/work"))

    assert resolve_add_path(ctx, Path("../notes/./x")) == Path("/home/me/notes/x")


def test_add_new_entry_discovers_origin_and_saves() -> None:
    git = FakeGit(repositories={Path("/src/a")}, remote_urls={Path("/src/a"): "git@host:a.git"})
    store = FakeRegistryStore()
    ctx = DerpvisContext.for_test(git=git, store=store)

    entry, created = add_entry(ctx, Path("/src/a"))

    assert created is True
    assert entry == RepositoryEntry(path=Path("/src/a"), source="git@host:a.git")
    assert store.saved.entries == (entry,)


def test_add_current_directory() -> None:
    cwd = Path("/home/me/dots")
    git = FakeGit(repositories={cwd}, remote_urls={cwd: "https://host/dots.git"})
    ctx = DerpvisContext.for_test(git=git, cwd=cwd)

    entry, created = add_entry(ctx, None)

    assert created is True
    assert entry.path == cwd


def test_add_same_path_twice_updates_source_without_duplicate() -> None:
    path = Path("/src/a")
    store = FakeRegistryStore(Registry([RepositoryEntry(path=path, source="old-url")]))
    git = FakeGit(repositories={path}, remote_urls={path: "new-url"})
    ctx = DerpvisContext.for_test(git=git, store=store)

    entry, created = add_entry(ctx, path)

    assert created is False
    assert len(ctx.registry) == 1
    assert ctx.registry.find(path) == RepositoryEntry(path=path, source="new-url")
    assert store.saved == ctx.registry


def test_add_missing_path_raises_and_does_not_save() -> None:
    store = FakeRegistryStore()
    ctx = DerpvisContext.for_test(store=store)

    with pytest.raises(PathNotFound):
        add_entry(ctx, Path("/nowhere"))

    assert store.save_count == 0


def test_add_without_remote_raises() -> None:
    git = FakeGit(repositories={Path("/src/a")})
    ctx = DerpvisContext.for_test(git=git)

    with pytest.raises(NoRemoteConfigured) as exc_info:
        add_entry(ctx, Path("/src/a"))

    assert exc_info.value.remote == "origin"


def test_add_subfolder_of_repository_is_rejected() -> None:
    sub = Path("/src/a/docs")
    git = FakeGit(
        repositories={Path("/src/a")},
        plain_paths={sub},
        remote_urls={Path("/src/a"): "git@host:a.git"},
    )
    store = FakeRegistryStore()
    ctx = DerpvisContext.for_test(git=git, store=store, cwd=sub)

    with pytest.raises(NotRepositoryRoot) as exc_info:
        add_entry(ctx, None)

    assert exc_info.value.path == sub
    assert len(ctx.registry) == 0
    assert store.save_count == 0
    assert git.remote_lookups == []


def test_add_uses_configured_remote() -> None:
    git = FakeGit(repositories={Path("/src/a")}, remote_urls={Path("/src/a"): "u"})
    config = DerpvisConfig(config_dir=Path("/fake"), remote="upstream")
    ctx = DerpvisContext.for_test(git=git, config=config)

    add_entry(ctx, Path("/src/a"))

    assert git.remote_lookups == [(Path("/src/a"), "upstream")]


def test_remove_by_display_index() -> None:
    entries = [RepositoryEntry(path=Path(p), source="") for p in ("/a", "/b", "/c")]
    store = FakeRegistryStore(Registry(entries))
    ctx = DerpvisContext.for_test(store=store)

    removed = remove_entry(ctx, 1)

    assert removed == entries[0]
    assert store.saved.entries == (entries[1], entries[2])


@pytest.mark.parametrize("index", [0, 4, -2])
def test_remove_out_of_range_is_noop(index: int) -> None:
    entries = [RepositoryEntry(path=Path(p), source="") for p in ("/a", "/b", "/c")]
    store = FakeRegistryStore(Registry(entries))
    ctx = DerpvisContext.for_test(store=store)

    assert remove_entry(ctx, index) is None
    assert ctx.registry.entries == tuple(entries)
    assert store.save_count == 0
