"""Protocol for filesystem operations."""

from typing import Protocol

from .models import AbsolutePath, WriteResult


class FileSystem(Protocol):
    """
    Protocol for async filesystem operations.

    All implementations must provide atomic write semantics and
    handle platform-specific details transparently.
    """

    # Path operations (sync - no I/O)
    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """
        Safely join path components.

        Args:
            base: Base absolute path
            *parts: Path segments to join

        Returns:
            New absolute path

        Raises:
            ValueError: If result escapes base directory
        """
        ...

    # Existence checks
    async def exists(self, path: AbsolutePath) -> bool:
        """Check if path exists (file or directory)."""
        ...

    async def is_file(self, path: AbsolutePath) -> bool:
        """Check if path exists and is a file."""
        ...

    async def is_dir(self, path: AbsolutePath) -> bool:
        """Check if path exists and is a directory."""
        ...

    # Read operations
    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        """
        Read text file contents.

        Raises:
            FileNotFoundError: If file doesn't exist
            IOError: On read failure
        """
        ...

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        """
        Read raw file contents.

        Raises:
            FileNotFoundError: If file doesn't exist
            IOError: On read failure
        """
        ...

    # Write operations (atomic)
    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        """
        Atomically write text to file.

        Uses temp file + atomic replace to ensure readers never
        observe partial writes. Parent directories are created.

        Raises:
            IOError: On write failure
        """
        ...

    # Directory operations
    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """
        Create directory and all parents.

        Raises:
            IOError: On creation failure
        """
        ...

    async def listdir(self, path: AbsolutePath) -> list[str]:
        """
        List directory contents (names only).

        Raises:
            FileNotFoundError: If directory doesn't exist
        """
        ...

    async def copy_tree(self, source: AbsolutePath, destination: AbsolutePath) -> int:
        """
        Copy a directory tree, merging into ``destination``.

        Existing files at the destination are overwritten; files that
        exist only at the destination are kept.

        Args:
            source: Directory to copy
            destination: Target directory (created if missing)

        Returns:
            Number of files copied

        Raises:
            FileNotFoundError: If source directory doesn't exist
        """
        ...

    # Removal operations
    async def remove(self, path: AbsolutePath) -> None:
        """
        Remove a file.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        ...

    async def rmdir(self, path: AbsolutePath, recursive: bool = False) -> None:
        """
        Remove a directory.

        Raises:
            FileNotFoundError: If directory doesn't exist
        """
        ...
