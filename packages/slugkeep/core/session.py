"""slugkeep session coordinator - one build invocation.

The session wires configuration and services together once per build:
- Configuration (slugkeep.yml) and the custom build file (build.yml)
- Environment snapshot, dependency checks, task runner, hooks
- Metadata store and artifact cache under the cache directory
- Controller selection from the framework capabilities
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
import os
from pathlib import Path
import time
from typing import Any
from uuid import uuid4

from slugkeep.core.build import (
    AssetPipelineController,
    BuildCacheController,
    BuildContext,
    BuildReport,
    BuildResult,
    BuildVariant,
    DependencySet,
    EnvironmentSnapshot,
    FrameworkCapabilities,
    LockfileDependencies,
    MigrationController,
    RakeTaskRunner,
    ShellBuildHooks,
    TaskRunner,
)
from slugkeep.core.build.decisions import migration_state, parse_version
from slugkeep.core.build.hooks import BuildHooks
from slugkeep.core.caching import ArtifactCache, FSArtifactCache
from slugkeep.core.config.loader import load_build_config, load_custom_build_config
from slugkeep.core.config.models import BuildConfig
from slugkeep.core.io import AbsolutePath, FileSystem, RealFileSystem, absolute_path
from slugkeep.core.metadata import FSMetadataStore, MetadataKey, MetadataStore
from slugkeep.core.utils.logging import get_logger

logger = logging.getLogger(__name__)


class BuildSession:
    """Coordinates the build cache controllers for one build.

    Every collaborator can be injected; defaults use the real filesystem,
    ``os.environ``, the bundler lockfile and rake.
    """

    def __init__(
        self,
        build_dir: Path | str,
        cache_dir: Path | str,
        *,
        config: BuildConfig | Path | str | None = None,
        fs: FileSystem | None = None,
        environ: Mapping[str, str] | None = None,
        tasks: TaskRunner | None = None,
        dependencies: DependencySet | None = None,
        hooks: BuildHooks | None = None,
        metadata: MetadataStore | None = None,
        cache: ArtifactCache | None = None,
        session_id: str | None = None,
    ) -> None:
        """Initialize session.

        Args:
            build_dir: Application being built
            cache_dir: Directory persisted between builds
            config: BuildConfig instance, path, or None (slugkeep.yml in build_dir)
            environ: Process environment (defaults to os.environ)

        Raises:
            FileNotFoundError: If an explicit config path doesn't exist
            ValidationError: If config files are invalid
        """
        self.build_dir: AbsolutePath = absolute_path(build_dir)
        self.cache_dir: AbsolutePath = absolute_path(cache_dir)
        self.session_id = session_id or str(uuid4())
        self.config = self._resolve_config(config, Path(self.build_dir))

        environ = dict(os.environ if environ is None else environ)
        custom = load_custom_build_config(Path(self.build_dir))

        self.fs: FileSystem = fs or RealFileSystem()
        self.environment = EnvironmentSnapshot.from_environ(environ, user_env=custom.env)
        self.dependencies = dependencies or LockfileDependencies.from_lockfile(
            Path(self.build_dir) / "Gemfile.lock"
        )
        self.tasks = tasks or RakeTaskRunner(
            Path(self.build_dir), self.config.tasks.command, base_env=environ
        )
        self.hooks = hooks or ShellBuildHooks(custom, Path(self.build_dir), base_env=environ)
        self.metadata = metadata or FSMetadataStore(
            self.fs, self.fs.join(self.cache_dir, *self.config.metadata_dir.split("/"))
        )
        self.cache = cache or FSArtifactCache(
            self.fs, self.fs.join(self.cache_dir, *self.config.artifact_dir.split("/"))
        )
        self.capabilities = FrameworkCapabilities.from_config(self.config.capabilities)

        self.log = get_logger(__name__, session_id=self.session_id)
        self.log.debug(f"Session initialized: build={self.build_dir}, cache={self.cache_dir}")

    @staticmethod
    def _resolve_config(value: Any, build_dir: Path) -> BuildConfig:
        if value is None:
            return load_build_config(build_dir=build_dir)
        elif isinstance(value, (Path, str)):
            return load_build_config(Path(value))
        elif isinstance(value, BuildConfig):
            return value
        else:
            raise TypeError(
                f"Expected BuildConfig, Path, str, or None; got {type(value).__name__}"
            )

    def context(self) -> BuildContext:
        return BuildContext(
            fs=self.fs,
            build_dir=self.build_dir,
            metadata=self.metadata,
            cache=self.cache,
            tasks=self.tasks,
            environment=self.environment,
            dependencies=self.dependencies,
            hooks=self.hooks,
        )

    def controllers(self, rollback: bool = False) -> list[BuildCacheController]:
        """Controllers for the variants this application supports, in order."""
        context = self.context()
        selected: list[BuildCacheController] = []
        for variant in self.capabilities.variants():
            if variant is BuildVariant.ASSETS:
                selected.append(AssetPipelineController(context, self.config.assets))
            elif variant is BuildVariant.MIGRATIONS:
                selected.append(
                    MigrationController(context, self.config.migrations, rollback_hint=rollback)
                )
        return selected

    async def compile(self, rollback: bool = False) -> BuildReport:
        """Run every selected controller, stopping at the first hard failure.

        Args:
            rollback: Ask the migration controller to roll back

        Returns:
            BuildReport with one result per controller that ran
        """
        start = time.perf_counter()
        results: list[BuildResult] = []

        for controller in self.controllers(rollback=rollback):
            self.log.debug(f"Running {controller.name} controller")
            result = await controller.run()
            results.append(result)
            if result.aborted:
                self.log.error(f"Build aborted by {controller.name}: {result.message}")
                break

        return BuildReport(
            success=all(r.ok for r in results),
            results=results,
            total_duration_ms=(time.perf_counter() - start) * 1000,
        )

    async def status(self) -> dict[str, Any]:
        """Current inputs next to the recorded state, without running anything."""
        assets = AssetPipelineController(self.context(), self.config.assets)
        migrations = MigrationController(self.context(), self.config.migrations)

        recorded: dict[str, str | None] = {}
        for key in MetadataKey:
            recorded[key.value] = (
                await self.metadata.read(key) if await self.metadata.exists(key) else None
            )

        current_schema = await migrations.schema_reader.read()
        return {
            "fingerprint": await assets.fingerprint(),
            "schema_version": current_schema,
            "migration_state": migration_state(
                parse_version(recorded[MetadataKey.SCHEMA_VERSION.value]), current_schema
            ),
            "recorded": recorded,
        }
