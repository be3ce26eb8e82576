"""Build task execution.

Tasks are external commands (rake tasks by default). The controllers only
need to know whether a task exists and, once run, whether it succeeded and
how long it took.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
import logging
import os
from pathlib import Path
import re
import time
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# `rake -P` prints one "rake <task>" line per task, followed by indented prerequisites
_TASK_LINE = re.compile(r"^rake (\S+)\s*$")

_READ_CHUNK = 64 * 1024


class TaskReport(BaseModel):
    """Outcome of a task invocation.

    Attributes:
        task: Task name
        defined: Whether the task exists in the project
        success: Whether the task exited zero
        elapsed_seconds: Wall-clock duration
        exit_code: Process exit code, None when the task did not run
    """

    task: str
    defined: bool = True
    success: bool
    elapsed_seconds: float = Field(default=0.0, ge=0.0)
    exit_code: int | None = None

    model_config = ConfigDict(frozen=True)


class TaskRunner(Protocol):
    """Protocol for running named build tasks."""

    async def is_defined(self, name: str) -> bool:
        """Whether the project defines task name."""
        ...

    async def invoke(self, name: str, env: Mapping[str, str]) -> TaskReport:
        """
        Run task name with env overlaid on the process environment.

        Blocks until the task finishes; there is no timeout.
        """
        ...


def parse_task_listing(output: str) -> set[str]:
    """Extract task names from ``rake -P`` output.

    Example:
        >>> listing = "rake assets:precompile\\n    environment\\nrake db:migrate\\n"
        >>> sorted(parse_task_listing(listing))
        ['assets:precompile', 'db:migrate']
    """
    names = set()
    for line in output.splitlines():
        match = _TASK_LINE.match(line)
        if match:
            names.add(match.group(1))
    return names


async def _log_output(stream: asyncio.StreamReader) -> None:
    """Log a task's output line by line, whatever the line length.

    Reads fixed-size chunks so a line longer than the stream buffer limit
    cannot stall the reader.
    """

    def _emit(line: bytes) -> None:
        logger.info(f"       {line.decode(errors='replace').rstrip()}")

    pending = b""
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            break
        *lines, pending = (pending + chunk).split(b"\n")
        for line in lines:
            _emit(line)
    if pending:
        _emit(pending)


class RakeTaskRunner:
    """
    Runs rake tasks as asyncio subprocesses in the build directory.

    The task list is loaded once, on first use, with ``<command> -P``.

    Example:
        >>> runner = RakeTaskRunner(Path("/app"))
        >>> if await runner.is_defined("db:migrate"):
        ...     report = await runner.invoke("db:migrate", {"RAILS_ENV": "production"})
    """

    def __init__(
        self,
        cwd: Path,
        command: Sequence[str] = ("bundle", "exec", "rake"),
        base_env: Mapping[str, str] | None = None,
    ) -> None:
        """
        Initialize runner.

        Args:
            cwd: Build directory tasks run in
            command: Command prefix; the task name is appended
            base_env: Environment tasks inherit (defaults to os.environ)
        """
        self.cwd = cwd
        self.command = list(command)
        self.base_env = dict(os.environ if base_env is None else base_env)
        self._tasks: set[str] | None = None

    async def _load_tasks(self) -> set[str]:
        if self._tasks is not None:
            return self._tasks

        try:
            process = await asyncio.create_subprocess_exec(
                *self.command,
                "-P",
                cwd=self.cwd,
                env=self.base_env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.warning(f"Could not list tasks with {' '.join(self.command)}: {e}")
            self._tasks = set()
            return self._tasks

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            logger.warning(
                f"Task listing failed with exit code {process.returncode}: "
                f"{stderr.decode(errors='replace').strip()}"
            )
            self._tasks = set()
        else:
            self._tasks = parse_task_listing(stdout.decode(errors="replace"))
            logger.debug(f"Loaded {len(self._tasks)} tasks")

        return self._tasks

    async def is_defined(self, name: str) -> bool:
        return name in await self._load_tasks()

    async def invoke(self, name: str, env: Mapping[str, str]) -> TaskReport:
        """Run task, streaming its combined output to the log."""
        if not await self.is_defined(name):
            return TaskReport(task=name, defined=False, success=False)

        logger.debug(f"Running: {' '.join(self.command)} {name}")
        start = time.perf_counter()

        process = await asyncio.create_subprocess_exec(
            *self.command,
            name,
            cwd=self.cwd,
            env={**self.base_env, **env},
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        assert process.stdout is not None
        try:
            await _log_output(process.stdout)
        except BaseException:
            if process.returncode is None:
                process.kill()
            raise
        finally:
            exit_code = await process.wait()

        return TaskReport(
            task=name,
            success=exit_code == 0,
            elapsed_seconds=time.perf_counter() - start,
            exit_code=exit_code,
        )
