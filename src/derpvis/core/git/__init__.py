"""Git interface and implementations."""

from derpvis.core.git.abc import Git

__all__ = ["Git"]
