"""Models for the artifact cache."""

from pydantic import BaseModel, Field


class CacheMeta(BaseModel):
    """
    Metadata committed after the directory tree is written (commit marker).

    Presence of meta.json indicates a complete, valid cache entry.
    """

    name: str = Field(description="Logical entry name (e.g., 'public/assets')")
    created_at: float = Field(description="Unix timestamp (seconds)")
    file_count: int = Field(default=0, ge=0, description="Number of files stored")
