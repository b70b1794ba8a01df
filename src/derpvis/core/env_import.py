"""Import of tracked folders from the DERPVIS_FOLDERS environment variable.

DERPVIS_FOLDERS is a list of `path` or `path(source)` tokens separated by
commas, or by colons outside parentheses, e.g.:

    ~/src/dotfiles(git@github.com:me/dotfiles.git),~/src/notes

Malformed tokens are skipped with a warning; the rest are still imported.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from derpvis.core.context import DerpvisContext
from derpvis.core.errors import MalformedEnvEntry
from derpvis.core.registry import RepositoryEntry

logger = logging.getLogger(__name__)

ENV_VAR = "DERPVIS_FOLDERS"

_TOKEN_SEPARATORS = {",", ":"}
_TOKEN_PATTERN = re.compile(r"^(?P<path>[^()]*)(?:\((?P<source>[^()]*)\))?$")


@dataclass(frozen=True)
class EnvParseResult:
    entries: list[RepositoryEntry]
    malformed: list[MalformedEnvEntry]


def split_env_value(value: str) -> list[str]:
    """Split value on separators that are not inside parentheses.

    Empty tokens are dropped. Unbalanced parentheses are left in the token for
    parse_env_token to reject.
    """
    tokens: list[str] = []
    current: list[str] = []
    depth = 0

    for char in value:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        if char in _TOKEN_SEPARATORS and depth == 0:
            tokens.append("".join(current))
            current = []
            continue
        current.append(char)
    tokens.append("".join(current))

    return [token.strip() for token in tokens if token.strip()]


def parse_env_token(token: str) -> RepositoryEntry:
    """Parse a single `path` or `path(source)` token.

    Raises:
        MalformedEnvEntry: If the token has unbalanced or repeated parentheses,
            trailing text after the source, or an empty path
    """
    if token.count("(") != token.count(")"):
        raise MalformedEnvEntry(token, "unbalanced parentheses")
    if token.count("(") > 1:
        raise MalformedEnvEntry(token, "expected at most one (source) group")

    match = _TOKEN_PATTERN.match(token)
    if match is None:
        raise MalformedEnvEntry(token, "expected 'path' or 'path(source)'")

    path = match.group("path").strip()
    if not path:
        raise MalformedEnvEntry(token, "missing path")

    source = (match.group("source") or "").strip()
    return RepositoryEntry(path=Path(path).expanduser(), source=source)


def parse_env_value(value: str) -> EnvParseResult:
    """Parse every token of value, collecting malformed ones instead of failing."""
    entries: list[RepositoryEntry] = []
    malformed: list[MalformedEnvEntry] = []

    for token in split_env_value(value):
        try:
            entries.append(parse_env_token(token))
        except MalformedEnvEntry as e:
            malformed.append(e)

    return EnvParseResult(entries=entries, malformed=malformed)


def import_env_folders(ctx: DerpvisContext, value: str | None) -> list[RepositoryEntry]:
    """Merge entries from value into the registry.

    Only paths not already tracked are added; existing entries keep their
    source. The registry is saved if anything was added.

    Returns:
        Entries that were added

    Raises:
        StorageWriteError: If the registry cannot be saved
    """
    if not value:
        return []

    result = parse_env_value(value)
    for error in result.malformed:
        ctx.feedback.warning(f"Skipping {error}")

    added = [entry for entry in result.entries if ctx.registry.add_if_absent(entry)]
    if added:
        logger.debug("Imported %d folder(s) from %s", len(added), ENV_VAR)
        ctx.save_registry()

    return added
