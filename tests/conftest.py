"""Shared pytest fixtures for slugkeep tests."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping

import pytest

from slugkeep.core.build import BuildContext, EnvironmentSnapshot, StaticDependencies, TaskReport
from slugkeep.core.caching import FSArtifactCache
from slugkeep.core.io import AbsolutePath, FakeFileSystem, absolute_path
from slugkeep.core.metadata import InMemoryMetadataStore

BUILD_DIR = "/app"
CACHE_ROOT = "/cache/artifacts"

DEFAULT_TASKS = ("assets:precompile", "db:migrate", "db:rollback")


class RecordingTaskRunner:
    """Task runner double that records invocations instead of spawning processes.

    Attributes:
        defined: Task names reported as defined
        failing: Task names whose invocation fails
        calls: (task, env) pairs in invocation order
        on_invoke: Optional coroutine run on each invocation, used to
            simulate task side effects such as compiled output
    """

    def __init__(
        self,
        defined: tuple[str, ...] = DEFAULT_TASKS,
        failing: tuple[str, ...] = (),
        on_invoke: Callable[[str, Mapping[str, str]], Awaitable[None]] | None = None,
    ) -> None:
        self.defined = set(defined)
        self.failing = set(failing)
        self.calls: list[tuple[str, dict[str, str]]] = []
        self.on_invoke = on_invoke

    @property
    def invoked(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def is_defined(self, name: str) -> bool:
        return name in self.defined

    async def invoke(self, name: str, env: Mapping[str, str]) -> TaskReport:
        self.calls.append((name, dict(env)))
        if self.on_invoke is not None:
            await self.on_invoke(name, env)
        success = name not in self.failing
        return TaskReport(
            task=name,
            success=success,
            elapsed_seconds=0.25,
            exit_code=0 if success else 1,
        )


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def fs() -> FakeFileSystem:
    """Provide fresh FakeFileSystem instance."""
    return FakeFileSystem()


@pytest.fixture
def build_dir() -> AbsolutePath:
    return absolute_path(BUILD_DIR)


@pytest.fixture
def metadata() -> InMemoryMetadataStore:
    return InMemoryMetadataStore()


@pytest.fixture
def artifact_cache(fs: FakeFileSystem) -> FSArtifactCache:
    return FSArtifactCache(fs, absolute_path(CACHE_ROOT))


@pytest.fixture
def tasks() -> RecordingTaskRunner:
    return RecordingTaskRunner()


@pytest.fixture
def make_context(
    fs: FakeFileSystem,
    build_dir: AbsolutePath,
    metadata: InMemoryMetadataStore,
    artifact_cache: FSArtifactCache,
    tasks: RecordingTaskRunner,
) -> Callable[..., BuildContext]:
    """Factory for BuildContext over the shared fakes.

    Keyword arguments override individual collaborators, e.g.
    ``make_context(environ={"FORCE_ASSETS_COMPILATION": ""})``.
    """

    def _make(
        environ: Mapping[str, str] | None = None,
        user_env: Mapping[str, str] | None = None,
        gems: tuple[str, ...] = ("pg",),
        **overrides: object,
    ) -> BuildContext:
        fields: dict[str, object] = {
            "fs": fs,
            "build_dir": build_dir,
            "metadata": metadata,
            "cache": artifact_cache,
            "tasks": tasks,
            "environment": EnvironmentSnapshot.from_environ(environ or {}, user_env=user_env),
            "dependencies": StaticDependencies(gems),
        }
        fields.update(overrides)
        return BuildContext(**fields)  # type: ignore[arg-type]

    return _make
