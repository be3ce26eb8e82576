"""Real filesystem implementation using aiofiles for async I/O.

Provides atomic writes via temp file + os.replace().
"""

import asyncio
import os
from pathlib import Path
import shutil
from tempfile import NamedTemporaryFile
import time

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]

from .models import AbsolutePath, WriteResult


def _copy_tree_blocking(source: str, destination: str) -> int:
    copied = 0

    def _copy(src: str, dst: str) -> str:
        nonlocal copied
        copied += 1
        return shutil.copy2(src, dst)

    shutil.copytree(source, destination, copy_function=_copy, dirs_exist_ok=True)
    return copied


class RealFileSystem:
    """
    Real filesystem implementation using aiofiles for async I/O.

    Blocking stdlib calls (tree copies, recursive removal, temp file
    creation) run in the default executor.
    """

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """Join paths (sync - no I/O)."""
        result = Path(base).joinpath(*parts).resolve()

        # Result must stay under base
        base_resolved = Path(base).resolve()
        try:
            result.relative_to(base_resolved)
        except ValueError as e:
            raise ValueError(f"Path traversal detected: {result} escapes {base}") from e

        return AbsolutePath(result)

    async def exists(self, path: AbsolutePath) -> bool:
        return bool(await aiofiles.os.path.exists(path))

    async def is_file(self, path: AbsolutePath) -> bool:
        return bool(await aiofiles.os.path.isfile(path))

    async def is_dir(self, path: AbsolutePath) -> bool:
        return bool(await aiofiles.os.path.isdir(path))

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        async with aiofiles.open(path, encoding=encoding) as f:
            content: str = await f.read()
            return content

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        async with aiofiles.open(path, mode="rb") as f:
            content: bytes = await f.read()
            return content

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        """Atomically write text file asynchronously."""
        start = time.perf_counter()
        path_obj = Path(path)

        await aiofiles.os.makedirs(path_obj.parent, exist_ok=True)

        # Temp file lives in the target directory so os.replace stays atomic
        loop = asyncio.get_running_loop()

        def create_temp_file() -> str:
            tmp = NamedTemporaryFile(
                mode="w",
                encoding=encoding,
                dir=path_obj.parent,
                delete=False,
            )
            tmp_path = tmp.name
            tmp.close()
            return tmp_path

        tmp_path = await loop.run_in_executor(None, create_temp_file)

        try:
            async with aiofiles.open(tmp_path, mode="w", encoding=encoding) as f:
                await f.write(content)

            await loop.run_in_executor(None, os.replace, tmp_path, str(path))
        except BaseException:
            if await aiofiles.os.path.exists(tmp_path):
                await aiofiles.os.unlink(tmp_path)
            raise

        duration = (time.perf_counter() - start) * 1000
        bytes_written = len(content.encode(encoding))

        return WriteResult(
            path=str(path),
            bytes_written=bytes_written,
            duration_ms=duration,
        )

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        await aiofiles.os.makedirs(path, exist_ok=exist_ok)

    async def listdir(self, path: AbsolutePath) -> list[str]:
        entries: list[str] = await aiofiles.os.listdir(path)
        return entries

    async def copy_tree(self, source: AbsolutePath, destination: AbsolutePath) -> int:
        """Merge-copy a directory tree, preserving file metadata."""
        if not await self.is_dir(source):
            raise FileNotFoundError(f"Directory not found: {source}")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, _copy_tree_blocking, str(source), str(destination)
        )

    async def remove(self, path: AbsolutePath) -> None:
        await aiofiles.os.unlink(path)

    async def rmdir(self, path: AbsolutePath, recursive: bool = False) -> None:
        if recursive:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, shutil.rmtree, str(path))
        else:
            await aiofiles.os.rmdir(path)
