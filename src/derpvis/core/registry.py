"""In-memory registry of tracked repositories.

The registry is an ordered list of entries keyed by path. Order is insertion
order and is never sorted, so the 1-based display index shown by `list` always
matches the order persisted to disk.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from pathlib import Path


@dataclass(frozen=True)
class RepositoryEntry:
    """A tracked (local path, remote source) pair."""

    path: Path
    source: str  # Empty for legacy entries recorded without a source


class Registry:
    """Ordered collection holding at most one entry per path."""

    def __init__(self, entries: Iterable[RepositoryEntry] = ()) -> None:
        self._entries: list[RepositoryEntry] = []
        for entry in entries:
            self.add_if_absent(entry)

    @property
    def entries(self) -> tuple[RepositoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RepositoryEntry]:
        return iter(tuple(self._entries))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Registry):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"Registry({self._entries!r})"

    def find(self, path: Path) -> RepositoryEntry | None:
        """Return the entry tracking path, or None."""
        index = self._index_of(path)
        if index is None:
            return None
        return self._entries[index]

    def upsert(self, entry: RepositoryEntry) -> bool:
        """Append entry, or update the source of the entry with the same path.

        Returns:
            True if a new entry was appended, False if an existing one was updated
        """
        index = self._index_of(entry.path)
        if index is None:
            self._entries.append(entry)
            return True

        self._entries[index] = replace(self._entries[index], source=entry.source)
        return False

    def add_if_absent(self, entry: RepositoryEntry) -> bool:
        """Append entry only if its path is not tracked yet.

        Existing entries are left untouched.

        Returns:
            True if the entry was appended
        """
        if self._index_of(entry.path) is not None:
            return False
        self._entries.append(entry)
        return True

    def remove_at(self, display_index: int) -> RepositoryEntry | None:
        """Remove the entry at a 1-based display index.

        Returns:
            The removed entry, or None when the index is out of range
        """
        if display_index < 1 or display_index > len(self._entries):
            return None
        return self._entries.pop(display_index - 1)

    def _index_of(self, path: Path) -> int | None:
        for i, existing in enumerate(self._entries):
            if existing.path == path:
                return i
        return None


def list_entries(registry: Registry) -> Iterator[tuple[int, RepositoryEntry]]:
    """Yield (display index, entry) pairs in persisted order.

    Each call returns a fresh iterator over a snapshot of the registry.
    """
    for index, entry in enumerate(registry.entries, start=1):
        yield index, entry


def format_entry_line(index: int, entry: RepositoryEntry) -> str:
    return f"{index}: {entry.path} ({entry.source})"
