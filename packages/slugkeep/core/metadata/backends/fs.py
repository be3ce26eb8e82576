"""Filesystem-backed metadata store.

One file per key under a fixed metadata directory, each holding the raw
string value.
"""

import logging

from slugkeep.core.io import AbsolutePath, FileSystem, sanitize_path_component

logger = logging.getLogger(__name__)


class FSMetadataStore:
    """
    Metadata store keeping one file per key.

    The metadata directory is created lazily on first write.
    """

    def __init__(self, fs: FileSystem, root: AbsolutePath) -> None:
        """
        Initialize store.

        Args:
            fs: Async filesystem implementation
            root: Absolute path to the metadata directory
        """
        self.fs = fs
        self.root = root

    def _key_path(self, key: str) -> AbsolutePath:
        return self.fs.join(self.root, sanitize_path_component(key))

    async def exists(self, key: str) -> bool:
        return await self.fs.is_file(self._key_path(key))

    async def read(self, key: str) -> str | None:
        """Read value, stripping one trailing line ending."""
        path = self._key_path(key)
        if not await self.fs.is_file(path):
            return None
        content = await self.fs.read_text(path)
        return content.removesuffix("\n").removesuffix("\r")

    async def write(self, key: str, value: str | int) -> None:
        await self.fs.mkdirs(self.root, exist_ok=True)
        await self.fs.write_text(self._key_path(key), str(value))
        logger.debug(f"Metadata written: {key}={value}")
