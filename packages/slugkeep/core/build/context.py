"""Shared dependencies for build controllers."""

from __future__ import annotations

from dataclasses import dataclass, field

from slugkeep.core.build.dependencies import DependencySet, StaticDependencies
from slugkeep.core.build.environment import EnvironmentSnapshot
from slugkeep.core.build.hooks import BuildHooks, NullBuildHooks
from slugkeep.core.build.tasks import TaskRunner
from slugkeep.core.caching import ArtifactCache
from slugkeep.core.io import AbsolutePath, FileSystem
from slugkeep.core.metadata import MetadataStore


@dataclass
class BuildContext:
    """Services and inputs shared by the controllers of one build.

    Attributes:
        fs: Filesystem used for the build directory
        build_dir: Application being built
        metadata: Durable metadata store
        cache: Artifact cache
        tasks: Task runner
        environment: Environment snapshot taken at build start
        dependencies: Dependency presence checks
        hooks: Custom build step runner

    Example:
        >>> context = BuildContext(
        ...     fs=RealFileSystem(),
        ...     build_dir=absolute_path("/app"),
        ...     metadata=FSMetadataStore(fs, absolute_path("/cache/vendor/heroku")),
        ...     cache=FSArtifactCache(fs, absolute_path("/cache/artifacts")),
        ...     tasks=RakeTaskRunner(Path("/app")),
        ... )
    """

    fs: FileSystem
    build_dir: AbsolutePath
    metadata: MetadataStore
    cache: ArtifactCache
    tasks: TaskRunner
    environment: EnvironmentSnapshot = field(default_factory=EnvironmentSnapshot)
    dependencies: DependencySet = field(default_factory=StaticDependencies)
    hooks: BuildHooks = field(default_factory=NullBuildHooks)

    def path(self, relative: str) -> AbsolutePath:
        """Absolute path of a build-directory-relative path."""
        return self.fs.join(self.build_dir, *relative.strip("/").split("/"))
