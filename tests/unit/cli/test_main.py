"""Tests for the slugkeep CLI."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from slugkeep.cli.main import build_arg_parser, compile_async, main
from slugkeep.core.build import BuildReport, BuildStepError
from slugkeep.core.build.result import (
    AssetDecision,
    MigrationDecision,
    failure_result,
    success_result,
    warning_result,
)


class StubSession:
    """Session double returning a canned report or raising."""

    def __init__(self, report: BuildReport | None = None, error: Exception | None = None):
        self.report = report
        self.error = error
        self.rollback: bool | None = None

    async def compile(self, rollback: bool = False) -> BuildReport:
        self.rollback = rollback
        if self.error is not None:
            raise self.error
        assert self.report is not None
        return self.report


class TestArgParser:
    """Tests for argument parsing."""

    def test_compile_arguments(self):
        args = build_arg_parser().parse_args(
            ["compile", "/app", "/cache", "--rollback", "--log-level", "DEBUG"]
        )

        assert args.cmd == "compile"
        assert args.build_dir == "/app"
        assert args.cache_dir == "/cache"
        assert args.rollback
        assert args.log_level == "DEBUG"
        assert not args.structured_logs

    def test_status_has_no_rollback(self):
        args = build_arg_parser().parse_args(["status", "/app", "/cache"])

        assert args.cmd == "status"
        assert not hasattr(args, "rollback")

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_arg_parser().parse_args([])


class TestCompileAsync:
    """Tests for exit codes."""

    async def test_success_exit_zero(self, capsys):
        session = StubSession(
            BuildReport(
                success=True,
                results=[success_result("assets", AssetDecision.RESTORE_FROM_CACHE, "cached")],
            )
        )

        assert await compile_async(session, rollback=True) == 0  # type: ignore[arg-type]
        assert session.rollback is True
        assert "assets: restore_from_cache" in capsys.readouterr().out

    async def test_warning_exit_zero(self, capsys):
        session = StubSession(
            BuildReport(
                success=True,
                results=[
                    warning_result(
                        "migrations", MigrationDecision.ROLLBACK, "Database rollback failed."
                    )
                ],
            )
        )

        assert await compile_async(session, rollback=False) == 0  # type: ignore[arg-type]
        assert "WARNING: Database rollback failed." in capsys.readouterr().out

    async def test_hard_failure_exit_one(self, capsys):
        session = StubSession(
            BuildReport(
                success=False,
                results=[
                    failure_result(
                        "assets", AssetDecision.RECOMPUTE, "Precompiling assets failed."
                    )
                ],
            )
        )

        assert await compile_async(session, rollback=False) == 1  # type: ignore[arg-type]
        assert "Build failed" in capsys.readouterr().out

    async def test_build_step_error_exit_one(self, capsys):
        session = StubSession(error=BuildStepError("before_assets_precompile", "false", 1))

        assert await compile_async(session, rollback=False) == 1  # type: ignore[arg-type]
        assert "before_assets_precompile" in capsys.readouterr().out


class TestMain:
    """End-to-end CLI runs against a real directory."""

    @pytest.fixture(autouse=True)
    def _restore_logging(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_compile_with_nothing_to_do(self, tmp_path: Path, monkeypatch, capsys):
        app = tmp_path / "app"
        app.mkdir()
        (app / "slugkeep.yml").write_text(
            "capabilities:\n  asset_pipeline: false\n  migrations: false\n"
        )
        monkeypatch.setattr("sys.argv", ["slugkeep", "compile", str(app), str(tmp_path / "c")])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        assert (tmp_path / "c").is_dir()

    def test_missing_build_dir(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(
            "sys.argv", ["slugkeep", "compile", str(tmp_path / "nope"), str(tmp_path / "c")]
        )

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1

    def test_status(self, tmp_path: Path, monkeypatch, capsys):
        app = tmp_path / "app"
        (app / "db").mkdir(parents=True)
        (app / "db" / "schema.rb").write_text("ActiveRecord::Schema.define(version: 7) do\nend\n")
        monkeypatch.setattr("sys.argv", ["slugkeep", "status", str(app), str(tmp_path / "c")])

        with pytest.raises(SystemExit) as exc_info:
            main()

        out = capsys.readouterr().out
        assert exc_info.value.code == 0
        assert "Schema version: 7" in out
        assert "no_prior_state" in out

    def test_debug_flag_covers_session_startup(self, tmp_path: Path, monkeypatch, capsys):
        """Test --log-level applies to log lines emitted while the session is set up."""
        app = tmp_path / "app"
        app.mkdir()
        (app / "slugkeep.yml").write_text(
            "capabilities:\n  asset_pipeline: false\n  migrations: false\n"
        )
        monkeypatch.setattr(
            "sys.argv",
            ["slugkeep", "status", str(app), str(tmp_path / "c"), "--log-level", "DEBUG"],
        )

        with pytest.raises(SystemExit):
            main()

        out = capsys.readouterr().out
        assert "Build config loaded" in out
        assert "Session initialized" in out
