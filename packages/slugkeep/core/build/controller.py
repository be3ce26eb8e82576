"""Build cache controller protocol and variant selection.

Each variant owns one kind of derived state (compiled assets, applied
migrations). Which variants run is decided once per build from a
``FrameworkCapabilities`` descriptor.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from slugkeep.core.build.result import BuildResult
from slugkeep.core.config.models import CapabilitiesConfig


class BuildVariant(StrEnum):
    """Controller variants, in execution order."""

    ASSETS = "assets"
    MIGRATIONS = "migrations"


class BuildCacheController(Protocol):
    """Protocol for build cache controllers.

    Uses Protocol pattern for structural subtyping (no inheritance required).
    """

    @property
    def name(self) -> str:
        """Controller name for logging and results."""
        ...

    async def run(self) -> BuildResult:
        """Decide, optionally run the controller's task, record new state.

        Returns:
            BuildResult; task failures are reported, never raised
        """
        ...


class FrameworkCapabilities(BaseModel):
    """What the application being built supports.

    Attributes:
        asset_pipeline: The app compiles assets with a pipeline task
        migrations: The app keeps its schema under migrations
    """

    asset_pipeline: bool = True
    migrations: bool = True

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_config(cls, config: CapabilitiesConfig) -> FrameworkCapabilities:
        return cls(asset_pipeline=config.asset_pipeline, migrations=config.migrations)

    def variants(self) -> list[BuildVariant]:
        """Variants to run, in execution order."""
        selected = []
        if self.asset_pipeline:
            selected.append(BuildVariant.ASSETS)
        if self.migrations:
            selected.append(BuildVariant.MIGRATIONS)
        return selected
