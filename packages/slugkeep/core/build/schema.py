"""Schema version extraction from the schema definition file."""

from __future__ import annotations

import logging
import re

from slugkeep.core.io import AbsolutePath, FileSystem

logger = logging.getLogger(__name__)

# Matches both
#   ActiveRecord::Schema.define(version: 2013_04_12_151201)
#   ActiveRecord::Schema[7.1].define(:version => 20130412151201)
_SCHEMA_DEFINE = re.compile(
    r"ActiveRecord::Schema(?:\[[\d.]+\])?\.define\(\s*"
    r"(?:version:|:version\s*=>)\s*([\d_]+)"
)


def parse_schema_version(content: str) -> int:
    """Latest defined schema version in schema file content, 0 if none.

    Example:
        >>> parse_schema_version("ActiveRecord::Schema.define(version: 2013_04_12) do")
        20130412
    """
    match = _SCHEMA_DEFINE.search(content)
    if not match:
        return 0
    digits = match.group(1).replace("_", "")
    return int(digits) if digits else 0


class SchemaVersionReader:
    """Reads the current schema version from the build directory."""

    def __init__(self, fs: FileSystem, schema_path: AbsolutePath) -> None:
        self.fs = fs
        self.schema_path = schema_path

    async def read(self) -> int:
        """Current schema version, 0 when the schema file is missing."""
        if not await self.fs.is_file(self.schema_path):
            logger.debug(f"No schema file at {self.schema_path}")
            return 0
        return parse_schema_version(await self.fs.read_text(self.schema_path))
