"""Durable key-value build metadata.

The metadata store is the only state that survives between builds. Each key
is a single file holding a raw string value.
"""

from slugkeep.core.metadata.backends.fs import FSMetadataStore
from slugkeep.core.metadata.backends.memory import InMemoryMetadataStore
from slugkeep.core.metadata.models import MetadataKey
from slugkeep.core.metadata.protocols import MetadataStore

__all__ = [
    "MetadataKey",
    "MetadataStore",
    "FSMetadataStore",
    "InMemoryMetadataStore",
]
