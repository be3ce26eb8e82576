"""Metadata keys owned by the build controllers."""

from enum import StrEnum


class MetadataKey(StrEnum):
    """Persisted metadata record names.

    The asset controller owns ``ASSETS_VERSION``; the migration controller
    owns the two schema keys.
    """

    ASSETS_VERSION = "assets_version"
    SCHEMA_VERSION = "schema_version"
    ROLLBACK_SCHEMA_VERSION = "rollback_schema_version"
