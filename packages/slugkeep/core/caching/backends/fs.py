"""Filesystem-backed artifact cache.

Provides atomic commit pattern (tree -> meta) for cache correctness.
"""

import logging
import time

from pydantic import ValidationError

from slugkeep.core.caching.models import CacheMeta
from slugkeep.core.io import AbsolutePath, FileSystem, sanitize_path_component

logger = logging.getLogger(__name__)


class FSArtifactCache:
    """
    Directory cache stored under a root directory.

    Layout per entry::

        <root>/<sanitized name>/tree/...   cached files
        <root>/<sanitized name>/meta.json  commit marker

    The cache lazily initializes on first use.
    """

    def __init__(self, fs: FileSystem, root: AbsolutePath) -> None:
        """
        Initialize filesystem cache.

        Args:
            fs: Async filesystem implementation
            root: Absolute path to cache root directory
        """
        self.fs = fs
        self.root = root
        self._initialized = False

    async def initialize(self) -> None:
        """
        Ensure the root exists.

        Called automatically on first use. Safe to call multiple times.
        """
        if not self._initialized:
            await self.fs.mkdirs(self.root, exist_ok=True)
            self._initialized = True

    def _entry_dir(self, name: str) -> AbsolutePath:
        return self.fs.join(self.root, sanitize_path_component(name))

    def _tree_dir(self, name: str) -> AbsolutePath:
        return self.fs.join(self._entry_dir(name), "tree")

    def _meta_path(self, name: str) -> AbsolutePath:
        return self.fs.join(self._entry_dir(name), "meta.json")

    async def _read_meta(self, name: str) -> CacheMeta | None:
        meta_path = self._meta_path(name)
        if not await self.fs.is_file(meta_path):
            return None
        try:
            meta = CacheMeta.model_validate_json(await self.fs.read_text(meta_path))
        except (ValidationError, ValueError):
            logger.warning(f"Corrupt cache metadata for '{name}', treating as miss")
            return None
        if meta.name != name:
            return None
        return meta

    async def exists(self, name: str) -> bool:
        """Both the tree and a valid commit marker must be present."""
        await self.initialize()
        if not await self.fs.is_dir(self._tree_dir(name)):
            return False
        return await self._read_meta(name) is not None

    async def load(self, name: str, destination: AbsolutePath) -> bool:
        await self.initialize()
        if not await self.exists(name):
            logger.debug(f"Cache miss: {name}")
            return False

        copied = await self.fs.copy_tree(self._tree_dir(name), destination)
        logger.debug(f"Cache restored: {name} ({copied} files)")
        return True

    async def store(self, name: str, source: AbsolutePath) -> None:
        """
        Replace the entry with a copy of source.

        The previous entry is removed first so files deleted from source
        do not linger in the cache.
        """
        await self.initialize()
        if not await self.fs.is_dir(source):
            raise FileNotFoundError(f"Cannot cache missing directory: {source}")

        await self.invalidate(name)
        entry_dir = self._entry_dir(name)
        await self.fs.mkdirs(entry_dir, exist_ok=True)

        file_count = await self.fs.copy_tree(source, self._tree_dir(name))

        # Meta last (commit marker)
        meta = CacheMeta(name=name, created_at=time.time(), file_count=file_count)
        await self.fs.write_text(self._meta_path(name), meta.model_dump_json(indent=2))
        logger.debug(f"Cache stored: {name} ({file_count} files)")

    async def invalidate(self, name: str) -> None:
        await self.initialize()
        entry_dir = self._entry_dir(name)
        if await self.fs.exists(entry_dir):
            await self.fs.rmdir(entry_dir, recursive=True)
