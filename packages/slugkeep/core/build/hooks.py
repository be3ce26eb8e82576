"""Custom build steps run before and after controller tasks.

Commands come from the ``steps`` section of ``build.yml``. A failing command
raises ``BuildStepError``; controllers let it propagate.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from enum import StrEnum
import logging
import os
from pathlib import Path
from typing import Protocol

from slugkeep.core.build.errors import BuildStepError
from slugkeep.core.config.models import CustomBuildConfig

logger = logging.getLogger(__name__)


class Hook(StrEnum):
    """Hook points exposed by the controllers."""

    BEFORE_ASSETS_PRECOMPILE = "before_assets_precompile"
    AFTER_ASSETS_PRECOMPILE = "after_assets_precompile"
    BEFORE_DATABASE_MIGRATIONS = "before_database_migrations"
    AFTER_DATABASE_MIGRATIONS = "after_database_migrations"


class BuildHooks(Protocol):
    """Protocol for hook runners."""

    async def run(self, hook: Hook) -> None:
        """Run every step registered for hook, in order."""
        ...


class NullBuildHooks:
    """Hook runner with no steps."""

    async def run(self, hook: Hook) -> None:
        pass


class ShellBuildHooks:
    """
    Runs custom build steps with the system shell.

    Example:
        >>> hooks = ShellBuildHooks(load_custom_build_config(build_dir), build_dir)
        >>> await hooks.run(Hook.BEFORE_ASSETS_PRECOMPILE)
    """

    def __init__(
        self,
        config: CustomBuildConfig,
        cwd: Path,
        base_env: Mapping[str, str] | None = None,
    ) -> None:
        self.config = config
        self.cwd = cwd
        self.base_env = dict(os.environ if base_env is None else base_env)

    async def run(self, hook: Hook) -> None:
        steps = self.config.custom_build_steps(hook)
        if not steps:
            return

        logger.info(f"Running custom build steps for {hook}")
        env = {**self.base_env, **self.config.env}

        for command in steps:
            logger.info(f"       $ {command}")
            process = await asyncio.create_subprocess_shell(
                command,
                cwd=self.cwd,
                env=env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
            stdout, _ = await process.communicate()
            for line in stdout.decode(errors="replace").splitlines():
                logger.info(f"       {line}")

            if process.returncode != 0:
                raise BuildStepError(hook, command, process.returncode or 1)
