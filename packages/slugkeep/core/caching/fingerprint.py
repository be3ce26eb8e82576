"""Content fingerprinting for asset inputs.

Produces a stable digest over an ordered list of files and directories.
"""

from collections.abc import Sequence
import hashlib
import logging
from pathlib import PurePosixPath
from typing import Protocol

from slugkeep.core.io import AbsolutePath, FileSystem

logger = logging.getLogger(__name__)


class ContentFingerprinter(Protocol):
    """Protocol for computing a digest over ordered source paths."""

    async def compute(self, paths: Sequence[str]) -> str:
        """
        Compute fingerprint for paths.

        Args:
            paths: Ordered source paths, relative to the fingerprinter's root

        Returns:
            Hex digest, identical for identical inputs
        """
        ...


class TreeFingerprinter:
    """
    SHA256 fingerprint over file names and contents.

    Paths are visited in the order given; directories are walked
    recursively in sorted order. Each file contributes its path relative to
    root and the digest of its bytes, so renames change the fingerprint as
    well as edits. Missing paths contribute nothing.

    Example:
        >>> fingerprinter = TreeFingerprinter(RealFileSystem(), absolute_path("/app"))
        >>> await fingerprinter.compute(["app/assets/", "config/javascript.yml"])
        '3f2a9c...'
    """

    def __init__(self, fs: FileSystem, root: AbsolutePath) -> None:
        self.fs = fs
        self.root = root

    async def compute(self, paths: Sequence[str]) -> str:
        digest = hashlib.sha256()
        file_count = 0

        for source in paths:
            relative = PurePosixPath(source.rstrip("/") or ".")
            async for rel_path, absolute in self._walk(relative):
                content = await self.fs.read_bytes(absolute)
                digest.update(str(rel_path).encode("utf-8"))
                digest.update(b"\0")
                digest.update(hashlib.sha256(content).digest())
                file_count += 1

        fingerprint = digest.hexdigest()
        logger.debug(f"Fingerprinted {file_count} files: {fingerprint[:12]}")
        return fingerprint

    async def _walk(self, relative: PurePosixPath):
        absolute = self.fs.join(self.root, *relative.parts)

        if await self.fs.is_file(absolute):
            yield relative, absolute
        elif await self.fs.is_dir(absolute):
            for name in sorted(await self.fs.listdir(absolute)):
                async for entry in self._walk(relative / name):
                    yield entry
