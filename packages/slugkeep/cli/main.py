"""Command-line interface for slugkeep."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
import sys

from rich.console import Console

from slugkeep.core.build import BuildReport, BuildStatus, BuildStepError
from slugkeep.core.config.loader import load_build_config
from slugkeep.core.session import BuildSession
from slugkeep.core.utils.logging import configure_logging

console = Console()
logger = logging.getLogger(__name__)

_STATUS_STYLE = {
    BuildStatus.SUCCESS: "green",
    BuildStatus.WARNING: "yellow",
    BuildStatus.FAILED: "red",
}


def print_report(report: BuildReport) -> None:
    """Print one line per controller result."""
    for result in report.results:
        style = _STATUS_STYLE[result.status]
        decision = result.decision or "skipped"
        line = f"[{style}]{result.controller}: {decision}[/{style}]"
        if result.message:
            line += f" - {result.message}"
        if result.elapsed_seconds is not None:
            line += f" ({result.elapsed_seconds:.2f}s)"
        console.print(line)

    console.print(f"Duration: {report.total_duration_ms:.0f}ms")


async def compile_async(session: BuildSession, rollback: bool) -> int:
    """Run the build controllers.

    Returns:
        Exit code (0 for success or warnings, 1 for a hard failure)
    """
    try:
        report = await session.compile(rollback=rollback)
    except BuildStepError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return 1

    print_report(report)

    if not report.success:
        console.print("[red]Build failed[/red]")
        return 1

    for warning in report.warnings:
        console.print(f"[yellow]WARNING: {warning.message}[/yellow]")
    return 0


async def status_async(session: BuildSession) -> int:
    status = await session.status()
    console.print(f"[bold]Assets fingerprint:[/bold] {status['fingerprint']}")
    console.print(f"[bold]Schema version:[/bold] {status['schema_version']}")
    console.print(f"[bold]Migration state:[/bold] {status['migration_state']}")
    for key, value in status["recorded"].items():
        console.print(f"   {key}: {value if value is not None else '[dim]unset[/dim]'}")
    return 0


def _session_from_args(args: argparse.Namespace) -> BuildSession:
    build_dir = Path(args.build_dir).resolve()
    if not build_dir.is_dir():
        console.print(f"[red]ERROR: Build directory not found: {build_dir}[/red]")
        sys.exit(1)

    cache_dir = Path(args.cache_dir).resolve()
    cache_dir.mkdir(parents=True, exist_ok=True)

    # Command-line settings apply while the config itself is loaded
    configure_logging(level=args.log_level or "INFO", structured=args.structured_logs)

    config_path = Path(args.config).resolve() if args.config else None
    config = load_build_config(config_path, build_dir=build_dir)

    log_config = config.logging
    configure_logging(
        level=args.log_level or log_config.level,
        format_string=log_config.format,
        structured=args.structured_logs or log_config.structured,
    )
    return BuildSession(build_dir, cache_dir, config=config)


def run_compile(args: argparse.Namespace) -> None:
    session = _session_from_args(args)
    sys.exit(asyncio.run(compile_async(session, rollback=args.rollback)))


def run_status(args: argparse.Namespace) -> None:
    session = _session_from_args(args)
    sys.exit(asyncio.run(status_async(session)))


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="slugkeep",
        description="slugkeep - incremental asset and migration steps for app builds",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    for name, help_text in (
        ("compile", "Compile assets and migrate the database if needed"),
        ("status", "Show current fingerprint, schema version and recorded state"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("build_dir", help="Application build directory")
        cmd.add_argument("cache_dir", help="Directory persisted between builds")
        cmd.add_argument("--config", default=None, help="Path to slugkeep config (YAML/JSON)")
        cmd.add_argument(
            "--log-level",
            default=None,
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Override configured log level",
        )
        cmd.add_argument(
            "--structured-logs", action="store_true", help="Emit JSON log lines"
        )

    sub.choices["compile"].add_argument(
        "--rollback", action="store_true", help="Roll the database back to the recorded version"
    )

    return p


def main() -> None:
    """Main entry point for CLI."""
    args = build_arg_parser().parse_args()

    if args.cmd == "compile":
        run_compile(args)
    elif args.cmd == "status":
        run_status(args)


if __name__ == "__main__":
    main()
