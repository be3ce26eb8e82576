"""Application dependency queries.

The controllers only ask whether a named dependency (gem) is present; they
never look at versions.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
from pathlib import Path
import re
from typing import Protocol

logger = logging.getLogger(__name__)

# Top-level spec lines in Gemfile.lock are indented exactly four spaces:
#     pg (1.5.4)
_LOCKFILE_SPEC = re.compile(r"^ {4}([A-Za-z0-9._-]+) \(")


class DependencySet(Protocol):
    """Presence checks for application dependencies."""

    def has_dependency(self, name: str) -> bool:
        """Whether dependency name is part of the application bundle."""
        ...


class StaticDependencies:
    """Fixed set of dependency names."""

    def __init__(self, names: Iterable[str] = ()) -> None:
        self.names = frozenset(names)

    def has_dependency(self, name: str) -> bool:
        return name in self.names


class LockfileDependencies(StaticDependencies):
    """Dependency names listed in a bundler lockfile."""

    @classmethod
    def from_lockfile(cls, path: Path) -> LockfileDependencies:
        """Read gem names from lockfile.

        A missing lockfile yields an empty set.
        """
        if not path.is_file():
            logger.debug(f"No lockfile at {path}")
            return cls()
        return cls(parse_lockfile(path.read_text(encoding="utf-8")))


def parse_lockfile(content: str) -> list[str]:
    """Extract top-level spec names from lockfile content.

    Example:
        >>> parse_lockfile("GEM\\n  specs:\\n    pg (1.5.4)\\n      rake\\n")
        ['pg']
    """
    names = []
    for line in content.splitlines():
        match = _LOCKFILE_SPEC.match(line)
        if match:
            names.append(match.group(1))
    return names
