"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from derpvis.core.config import DerpvisConfig, load_config
from derpvis.core.git.abc import Git
from derpvis.core.git.real import RealGit
from derpvis.core.registry import Registry
from derpvis.core.registry_store import FilesystemRegistryStore, RegistryStore
from derpvis.core.user_feedback import (
    InteractiveFeedback,
    InteractiveUserInput,
    UserFeedback,
    UserInput,
)


@dataclass(frozen=True)
class DerpvisContext:
    """Immutable context holding all dependencies for derpvis operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental rebinding at runtime; the registry object
    itself is mutated by add/remove/import and saved through `store`.
    """

    git: Git
    store: RegistryStore
    registry: Registry
    config: DerpvisConfig
    feedback: UserFeedback
    user_input: UserInput
    cwd: Path  # Current working directory at CLI invocation

    def save_registry(self) -> None:
        """Persist the full in-memory registry.

        Raises:
            StorageWriteError: If the registry cannot be written
        """
        self.store.save(self.registry)

    @staticmethod
    def for_test(
        git: Git | None = None,
        store: RegistryStore | None = None,
        registry: Registry | None = None,
        config: DerpvisConfig | None = None,
        feedback: UserFeedback | None = None,
        user_input: UserInput | None = None,
        cwd: Path | None = None,
    ) -> "DerpvisContext":
        """Create test context with optional pre-configured collaborators.

        Args:
            git: Git implementation, defaults to an empty FakeGit
            store: Registry store, defaults to a FakeRegistryStore seeded
                   with `registry`
            registry: Registry loaded at startup; if omitted, loaded from store
            config: Configuration, defaults to built-in defaults
            feedback: Feedback sink, defaults to FakeUserFeedback
            user_input: Prompt source, defaults to FakeUserInput with no answers
            cwd: Current working directory, defaults to a sentinel path

        Returns:
            Frozen DerpvisContext for use in tests
        """
        from derpvis.core.git.fake import FakeGit
        from derpvis.core.registry_store import FakeRegistryStore
        from tests.fakes.user_feedback import FakeUserFeedback, FakeUserInput

        if store is None:
            store = FakeRegistryStore(registry)
        if registry is None:
            registry = store.load()

        return DerpvisContext(
            git=git if git is not None else FakeGit(),
            store=store,
            registry=registry,
            config=config if config is not None else DerpvisConfig(config_dir=Path("/fake")),
            feedback=feedback if feedback is not None else FakeUserFeedback(),
            user_input=user_input if user_input is not None else FakeUserInput(),
            cwd=cwd if cwd is not None else Path("/test/default/cwd"),
        )


def create_context(config_dir: Path | None = None) -> DerpvisContext:
    """Create production context with real implementations.

    Called at CLI entry point. Loads config, then the registry (creating the
    config directory and an empty folders.json on first run).

    Raises:
        ConfigError: If config.toml is invalid
        StorageReadError, StorageWriteError, CorruptRegistry: If the registry
            cannot be loaded
    """
    config = load_config(config_dir)
    store = FilesystemRegistryStore(config.registry_path)
    registry = store.load()

    return DerpvisContext(
        git=RealGit(timeout=config.timeout_seconds),
        store=store,
        registry=registry,
        config=config,
        feedback=InteractiveFeedback(),
        user_input=InteractiveUserInput(),
        cwd=Path.cwd(),
    )
