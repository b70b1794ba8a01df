"""Persistence for the repository registry.

Architecture:
- RegistryStore: Abstract base class defining load/save
- FilesystemRegistryStore: Production implementation backed by folders.json
- FakeRegistryStore: In-memory implementation for tests

folders.json holds a JSON array. Each item is either a raw path string
(legacy schema) or an object {"folder": ..., "source": ...} (current schema).
Both are accepted on load; save always writes the current schema.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from derpvis.core.errors import CorruptRegistry, StorageReadError, StorageWriteError
from derpvis.core.registry import Registry, RepositoryEntry

logger = logging.getLogger(__name__)

REGISTRY_FILENAME = "folders.json"


class RegistryStore(ABC):
    """Abstract interface for loading and saving the registry."""

    @abstractmethod
    def load(self) -> Registry:
        """Load the registry, creating empty storage on first run.

        Raises:
            StorageReadError: If storage exists but cannot be read
            StorageWriteError: If first-run storage cannot be created
            CorruptRegistry: If storage content does not match the schema
        """
        ...

    @abstractmethod
    def save(self, registry: Registry) -> None:
        """Overwrite storage with the full registry.

        Raises:
            StorageWriteError: If storage cannot be written
        """
        ...

    @abstractmethod
    def path(self) -> Path:
        """Location of the backing storage (for messages)."""
        ...


class FilesystemRegistryStore(RegistryStore):
    """Registry stored as folders.json inside the config directory."""

    def __init__(self, registry_path: Path) -> None:
        self._registry_path = registry_path

    def path(self) -> Path:
        return self._registry_path

    def load(self) -> Registry:
        if not self._registry_path.exists():
            logger.debug("Creating empty registry at %s", self._registry_path)
            self._write_text("[]\n")
            return Registry()

        try:
            content = self._registry_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptRegistry(f"{self._registry_path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageReadError(f"Cannot read {self._registry_path}: {e}") from e

        return parse_registry(content, source_name=str(self._registry_path))

    def save(self, registry: Registry) -> None:
        self._write_text(serialize_registry(registry))
        logger.debug("Saved %d entries to %s", len(registry), self._registry_path)

    def _write_text(self, content: str) -> None:
        """Write content via a temp file renamed over the target."""
        directory = self._registry_path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=directory, prefix=f".{self._registry_path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self._registry_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Cannot write {self._registry_path}: {e}") from e


class FakeRegistryStore(RegistryStore):
    """In-memory registry store for tests.

    Saved registries are kept as serialized snapshots so tests can assert on
    exactly what would have been written.
    """

    def __init__(self, registry: Registry | None = None) -> None:
        self._content = serialize_registry(registry if registry is not None else Registry())
        self._save_count = 0

    def path(self) -> Path:
        return Path("/fake/derpvis") / REGISTRY_FILENAME

    def load(self) -> Registry:
        return parse_registry(self._content, source_name="<memory>")

    def save(self, registry: Registry) -> None:
        self._content = serialize_registry(registry)
        self._save_count += 1

    @property
    def save_count(self) -> int:
        return self._save_count

    @property
    def saved(self) -> Registry:
        """Registry as it would be read back from storage."""
        return self.load()


def parse_registry(content: str, *, source_name: str) -> Registry:
    """Parse folders.json content into a Registry.

    Raises:
        CorruptRegistry: On invalid JSON or a schema mismatch
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise CorruptRegistry(f"{source_name} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise CorruptRegistry(f"{source_name} must contain a JSON array")

    entries = [_parse_item(item, source_name=source_name) for item in data]
    return Registry(entries)


def _parse_item(item: Any, *, source_name: str) -> RepositoryEntry:
    # Legacy schema: bare path string
    if isinstance(item, str):
        return RepositoryEntry(path=Path(item), source="")

    if not isinstance(item, dict):
        raise CorruptRegistry(f"{source_name}: unexpected entry {item!r}")

    folder = item.get("folder")
    source = item.get("source", "")
    if not isinstance(folder, str) or not folder:
        raise CorruptRegistry(f"{source_name}: entry without a 'folder' path: {item!r}")
    if not isinstance(source, str):
        raise CorruptRegistry(f"{source_name}: 'source' must be a string: {item!r}")

    return RepositoryEntry(path=Path(folder), source=source)


def serialize_registry(registry: Registry) -> str:
    data = [{"folder": str(entry.path), "source": entry.source} for entry in registry]
    return json.dumps(data, indent=2) + "\n"
