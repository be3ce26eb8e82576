"""Protocol for artifact cache backends."""

from typing import Protocol

from slugkeep.core.io import AbsolutePath


class ArtifactCache(Protocol):
    """
    Protocol for wholesale directory caches.

    Entries are keyed by a fixed logical name and hold a whole directory
    tree; there is no per-file lookup. Implementations must:
    - Write the tree before the commit marker
    - Treat missing or corrupt entries as misses
    """

    async def exists(self, name: str) -> bool:
        """Check if a complete entry is stored under name."""
        ...

    async def load(self, name: str, destination: AbsolutePath) -> bool:
        """
        Restore cached tree into destination (merge copy).

        Args:
            name: Logical entry name
            destination: Directory to restore into

        Returns:
            True if an entry was restored, False on miss (no-op)
        """
        ...

    async def store(self, name: str, source: AbsolutePath) -> None:
        """
        Replace the entry under name with a copy of source.

        Args:
            name: Logical entry name
            source: Directory to cache

        Raises:
            FileNotFoundError: If source directory does not exist
        """
        ...

    async def invalidate(self, name: str) -> None:
        """Delete the entry under name, if any."""
        ...
