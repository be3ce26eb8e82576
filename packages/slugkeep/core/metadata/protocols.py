"""Protocol for metadata store backends."""

from typing import Protocol


class MetadataStore(Protocol):
    """
    Persisted key -> string map surviving across builds.

    Writes overwrite the whole value. ``exists`` can be queried before
    ``read`` so callers never need a sentinel value.
    """

    async def exists(self, key: str) -> bool:
        """Check whether a value has been recorded for key."""
        ...

    async def read(self, key: str) -> str | None:
        """
        Read recorded value.

        Returns:
            Stored value without its trailing newline, or None if absent
        """
        ...

    async def write(self, key: str, value: str | int) -> None:
        """Record value for key, replacing any previous value."""
        ...
