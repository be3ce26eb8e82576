"""Incremental build controllers.

Core concepts:
- BuildCacheController: one kind of derived state kept valid across builds
- AssetPipelineController: compiled assets, keyed by a content fingerprint
- MigrationController: applied schema migrations, keyed by schema version
- BuildContext: services shared by the controllers of one build
- BuildResult: explicit success / warning / failed outcome

Example:
    >>> context = BuildContext(fs=fs, build_dir=build_dir, metadata=store,
    ...                        cache=cache, tasks=RakeTaskRunner(build_dir))
    >>> result = await AssetPipelineController(context).run()
    >>> if result.aborted:
    ...     raise SystemExit(1)
"""

from slugkeep.core.build.assets import AssetPipelineController
from slugkeep.core.build.context import BuildContext
from slugkeep.core.build.controller import (
    BuildCacheController,
    BuildVariant,
    FrameworkCapabilities,
)
from slugkeep.core.build.dependencies import (
    DependencySet,
    LockfileDependencies,
    StaticDependencies,
)
from slugkeep.core.build.environment import EnvironmentSnapshot
from slugkeep.core.build.errors import BuildError, BuildStepError
from slugkeep.core.build.hooks import BuildHooks, Hook, NullBuildHooks, ShellBuildHooks
from slugkeep.core.build.migrations import MigrationController
from slugkeep.core.build.result import (
    AssetDecision,
    BuildReport,
    BuildResult,
    BuildStatus,
    MigrationDecision,
)
from slugkeep.core.build.schema import SchemaVersionReader
from slugkeep.core.build.tasks import RakeTaskRunner, TaskReport, TaskRunner

__all__ = [
    "AssetDecision",
    "AssetPipelineController",
    "BuildCacheController",
    "BuildContext",
    "BuildError",
    "BuildHooks",
    "BuildReport",
    "BuildResult",
    "BuildStatus",
    "BuildStepError",
    "BuildVariant",
    "DependencySet",
    "EnvironmentSnapshot",
    "FrameworkCapabilities",
    "Hook",
    "LockfileDependencies",
    "MigrationController",
    "MigrationDecision",
    "NullBuildHooks",
    "RakeTaskRunner",
    "SchemaVersionReader",
    "ShellBuildHooks",
    "StaticDependencies",
    "TaskReport",
    "TaskRunner",
]
