"""No-op artifact cache.

Always reports cache miss, discards all stores.
"""

from slugkeep.core.io import AbsolutePath


class NullArtifactCache:
    """No-op artifact cache for builds without a cache directory."""

    async def exists(self, name: str) -> bool:
        return False

    async def load(self, name: str, destination: AbsolutePath) -> bool:
        return False

    async def store(self, name: str, source: AbsolutePath) -> None:
        pass

    async def invalidate(self, name: str) -> None:
        pass
