"""Exceptions raised by build collaborators.

Task outcomes are reported through ``BuildResult``, not exceptions; these
cover failures outside the controllers' decision policy.
"""


class BuildError(Exception):
    """Base class for slugkeep build errors."""


class BuildStepError(BuildError):
    """A custom build step (hook command) exited non-zero."""

    def __init__(self, hook: str, command: str, exit_code: int) -> None:
        self.hook = hook
        self.command = command
        self.exit_code = exit_code
        super().__init__(f"Build step for '{hook}' failed with exit code {exit_code}: {command}")
