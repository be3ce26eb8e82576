"""Integration tests: repeated builds over a real build and cache directory.

Only the task runner is faked; filesystem, metadata, cache, fingerprints and
config loading are real.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
import shutil

import pytest

from slugkeep.core.build import AssetDecision, MigrationDecision, StaticDependencies
from slugkeep.core.session import BuildSession
from tests.conftest import RecordingTaskRunner

SCHEMA = "ActiveRecord::Schema.define(version: {version}) do\nend\n"


class Workspace:
    """A source checkout copied into a fresh build directory for every build."""

    def __init__(self, root: Path) -> None:
        self.source = root / "source"
        self.cache = root / "cache"
        self.builds = root / "builds"
        self.count = 0
        (self.source / "app" / "assets" / "stylesheets").mkdir(parents=True)
        (self.source / "db").mkdir()
        self.write("app/assets/stylesheets/app.css", "body{}")
        self.schema(7)

    def write(self, relative: str, content: str) -> None:
        path = self.source / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    def schema(self, version: int) -> None:
        self.write("db/schema.rb", SCHEMA.format(version=version))

    async def build(self, tasks: RecordingTaskRunner, environ: dict[str, str] | None = None):
        self.count += 1
        build_dir = self.builds / str(self.count)
        shutil.copytree(self.source, build_dir)

        async def _compile(name: str, env: Mapping[str, str]) -> None:
            if name == "assets:precompile":
                out = build_dir / "public" / "assets"
                out.mkdir(parents=True, exist_ok=True)
                (out / f"app-{self.count}.css").write_text("compiled")
                (out / "manifest.yml").write_text(f"build: {self.count}")

        tasks.on_invoke = _compile
        session = BuildSession(
            build_dir,
            self.cache,
            environ=environ or {},
            tasks=tasks,
            dependencies=StaticDependencies(["pg"]),
        )
        return build_dir, await session.compile()


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    return Workspace(tmp_path)


class TestBuildCycle:
    """Tests for state carried between builds through the cache directory."""

    async def test_first_then_unchanged_build(
        self, workspace: Workspace, tasks: RecordingTaskRunner
    ):
        _, first = await workspace.build(tasks)

        assert first.success
        assert first.get_result("assets").decision == AssetDecision.RECOMPUTE
        assert first.get_result("migrations").decision == MigrationDecision.FORWARD
        metadata_dir = workspace.cache / "vendor" / "heroku"
        assert (metadata_dir / "schema_version").read_text() == "7"
        assert (metadata_dir / "rollback_schema_version").read_text() == "0"
        assert len((metadata_dir / "assets_version").read_text()) == 64

        build_dir, second = await workspace.build(tasks)

        assert second.get_result("assets").decision == AssetDecision.RESTORE_FROM_CACHE
        assert second.get_result("migrations").decision == MigrationDecision.NOOP
        assert (build_dir / "public" / "assets" / "app-1.css").is_file()
        assert tasks.invoked == ["assets:precompile", "db:migrate"]

    async def test_changed_assets_and_schema(
        self, workspace: Workspace, tasks: RecordingTaskRunner
    ):
        await workspace.build(tasks)
        workspace.write("app/assets/stylesheets/app.css", "body{color:red}")
        workspace.schema(9)

        build_dir, report = await workspace.build(tasks)

        assert report.get_result("assets").decision == AssetDecision.RECOMPUTE
        assert report.get_result("migrations").decision == MigrationDecision.FORWARD
        assert (build_dir / "public" / "assets" / "manifest.yml").read_text() == "build: 2"
        metadata_dir = workspace.cache / "vendor" / "heroku"
        assert (metadata_dir / "rollback_schema_version").read_text() == "7"

    async def test_force_flags(self, workspace: Workspace, tasks: RecordingTaskRunner):
        await workspace.build(tasks)

        _, report = await workspace.build(
            tasks,
            environ={"FORCE_ASSETS_COMPILATION": "", "FORCE_DATABASE_MIGRATIONS": ""},
        )

        assert report.get_result("assets").decision == AssetDecision.RECOMPUTE
        assert report.get_result("migrations").decision == MigrationDecision.FORWARD
        assert tasks.invoked == ["assets:precompile", "db:migrate"] * 2

    async def test_regressed_schema_rolls_back(
        self, workspace: Workspace, tasks: RecordingTaskRunner
    ):
        await workspace.build(tasks)
        workspace.schema(9)
        await workspace.build(tasks)
        workspace.schema(7)

        _, report = await workspace.build(tasks)

        result = report.get_result("migrations")
        assert result.decision == MigrationDecision.ROLLBACK
        name, env = tasks.calls[-1]
        assert name == "db:rollback"
        assert env["VERSION"] == "7"

    async def test_custom_build_env_reaches_tasks(
        self, workspace: Workspace, tasks: RecordingTaskRunner
    ):
        workspace.write("build.yml", "env:\n  RAILS_ENV: staging\n  CUSTOM_ENV: 'yes'\n")

        await workspace.build(tasks)

        for _, env in tasks.calls:
            assert env["RAILS_ENV"] == "staging"
            assert env["CUSTOM_ENV"] == "yes"
