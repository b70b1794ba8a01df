"""Configuration data structures and loading.

Provides immutable config data loaded from <config dir>/config.toml. The file
is optional: every field has a default.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

import click

from derpvis.core.errors import ConfigError
from derpvis.core.registry_store import REGISTRY_FILENAME

APP_NAME = "derpvis"
CONFIG_DIR_ENV_VAR = "DERPVIS_CONFIG_DIR"
CONFIG_FILENAME = "config.toml"

DEFAULT_MAX_WORKERS = 8
DEFAULT_TIMEOUT_SECONDS = 300.0
DEFAULT_REMOTE = "origin"


@dataclass(frozen=True)
class DerpvisConfig:
    """Immutable configuration data.

    Loaded once at CLI entry point and stored in DerpvisContext.
    """

    config_dir: Path
    max_workers: int = DEFAULT_MAX_WORKERS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    remote: str = DEFAULT_REMOTE

    @property
    def registry_path(self) -> Path:
        return self.config_dir / REGISTRY_FILENAME


def default_config_dir() -> Path:
    """Per-user config directory, overridable with DERPVIS_CONFIG_DIR."""
    override = os.environ.get(CONFIG_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(click.get_app_dir(APP_NAME))


def load_config(config_dir: Path | None = None) -> DerpvisConfig:
    """Load config.toml from the config directory.

    Args:
        config_dir: Directory holding config.toml and folders.json
                    (defaults to default_config_dir())

    Returns:
        DerpvisConfig with loaded values, or defaults if the file is missing

    Raises:
        ConfigError: If the file is not valid TOML or a value has the wrong type
    """
    directory = config_dir if config_dir is not None else default_config_dir()
    config_path = directory / CONFIG_FILENAME

    if not config_path.exists():
        return DerpvisConfig(config_dir=directory)

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot load {config_path}: {e}") from e

    max_workers = data.get("max_workers", DEFAULT_MAX_WORKERS)
    if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
        raise ConfigError(f"'max_workers' in {config_path} must be a positive integer")

    timeout_seconds = data.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    if (
        isinstance(timeout_seconds, bool)
        or not isinstance(timeout_seconds, int | float)
        or timeout_seconds <= 0
    ):
        raise ConfigError(f"'timeout_seconds' in {config_path} must be a positive number")

    remote = data.get("remote", DEFAULT_REMOTE)
    if not isinstance(remote, str) or not remote:
        raise ConfigError(f"'remote' in {config_path} must be a non-empty string")

    return DerpvisConfig(
        config_dir=directory,
        max_workers=max_workers,
        timeout_seconds=float(timeout_seconds),
        remote=remote,
    )
