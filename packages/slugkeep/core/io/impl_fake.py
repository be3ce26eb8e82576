"""In-memory filesystem for fast, isolated testing.

Simulates filesystem operations without disk I/O.
Async operations complete immediately but maintain async interface.
"""

from pathlib import Path

from .models import AbsolutePath, WriteResult


class FakeFileSystem:
    """
    In-memory async filesystem for testing.

    File contents are kept as bytes; text helpers encode and decode.
    Not thread-safe (use per-test instance).
    """

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}
        self._dirs: set[str] = {"/"}  # Root always exists

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """Join paths (sync - no I/O)."""
        result = Path(base).joinpath(*parts)

        if not result.is_absolute():
            result = Path("/") / result

        return AbsolutePath(result)

    async def exists(self, path: AbsolutePath) -> bool:
        path_str = str(Path(path))
        return path_str in self._files or path_str in self._dirs

    async def is_file(self, path: AbsolutePath) -> bool:
        return str(Path(path)) in self._files

    async def is_dir(self, path: AbsolutePath) -> bool:
        return str(Path(path)) in self._dirs

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        return (await self.read_bytes(path)).decode(encoding)

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        path_str = str(Path(path))
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        return self._files[path_str]

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        data = content.encode(encoding)
        self._put(Path(path), data)
        return WriteResult(path=str(Path(path)), bytes_written=len(data), duration_ms=0.0)

    def _put(self, path: Path, data: bytes) -> None:
        self._ensure_parents(path.parent)
        self._files[str(path)] = data

    def _ensure_parents(self, path: Path) -> None:
        """Recursively create parent directories (sync helper)."""
        parts = path.parts
        for i in range(1, len(parts) + 1):
            self._dirs.add(str(Path(*parts[:i])))

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        path_str = str(Path(path))
        if not exist_ok and path_str in self._dirs:
            raise FileExistsError(f"Directory exists: {path}")
        self._ensure_parents(Path(path))

    async def listdir(self, path: AbsolutePath) -> list[str]:
        path_str = str(Path(path))
        if path_str not in self._dirs:
            raise FileNotFoundError(f"Directory not found: {path}")

        children = set()
        for entry in [*self._files.keys(), *self._dirs]:
            entry_path = Path(entry)
            if entry_path != Path(path_str) and entry_path.parent == Path(path_str):
                children.add(entry_path.name)

        return sorted(children)

    async def copy_tree(self, source: AbsolutePath, destination: AbsolutePath) -> int:
        src = Path(source)
        dst = Path(destination)
        if str(src) not in self._dirs:
            raise FileNotFoundError(f"Directory not found: {source}")

        self._ensure_parents(dst)
        for dir_path in [d for d in self._dirs if Path(d).is_relative_to(src)]:
            self._ensure_parents(dst / Path(dir_path).relative_to(src))

        copied = 0
        for file_path, data in list(self._files.items()):
            if Path(file_path).is_relative_to(src):
                self._put(dst / Path(file_path).relative_to(src), data)
                copied += 1
        return copied

    async def remove(self, path: AbsolutePath) -> None:
        path_str = str(Path(path))
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        del self._files[path_str]

    async def rmdir(self, path: AbsolutePath, recursive: bool = False) -> None:
        path_str = str(Path(path))
        if path_str not in self._dirs:
            raise FileNotFoundError(f"Directory not found: {path}")

        if recursive:
            for p in [p for p in self._files if p.startswith(path_str + "/")]:
                del self._files[p]
            for p in [p for p in self._dirs if p.startswith(path_str + "/")]:
                self._dirs.discard(p)
        elif await self.listdir(path):
            raise OSError(f"Directory not empty: {path}")

        self._dirs.discard(path_str)
