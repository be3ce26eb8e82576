"""Filesystem abstraction layer for slugkeep.

Provides safe, testable, async filesystem operations.

Example:
    >>> from slugkeep.core.io import RealFileSystem, absolute_path
    >>> fs = RealFileSystem()
    >>> path = fs.join(absolute_path("/tmp"), "cache", "assets_version")
    >>> await fs.write_text(path, "d41d8cd98f00b204")
    >>> content = await fs.read_text(path)
"""

from .impl_fake import FakeFileSystem
from .impl_real import RealFileSystem
from .models import AbsolutePath, WriteResult, absolute_path
from .protocols import FileSystem
from .utils import sanitize_path_component

__all__ = [
    "AbsolutePath",
    "absolute_path",
    "WriteResult",
    "FileSystem",
    "RealFileSystem",
    "FakeFileSystem",
    "sanitize_path_component",
]
