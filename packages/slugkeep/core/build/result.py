"""Result types for build controllers.

Controllers never raise for task outcomes; callers branch on
``BuildResult.status``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BuildStatus(StrEnum):
    """Outcome kind of a controller run."""

    SUCCESS = "success"
    WARNING = "warning"  # soft failure, build continues
    FAILED = "failed"  # hard failure, build aborts


class AssetDecision(StrEnum):
    """What the asset controller did this build."""

    SKIP = "skip"
    RESTORE_FROM_CACHE = "restore_from_cache"
    RECOMPUTE = "recompute"


class MigrationDecision(StrEnum):
    """What the migration controller did this build."""

    NOOP = "noop"
    FORWARD = "forward"
    ROLLBACK = "rollback"


class BuildResult(BaseModel):
    """Result from a single controller run.

    Attributes:
        controller: Name of the controller that produced the result
        status: success, warning (soft failure) or failed (hard failure)
        decision: Decision taken (AssetDecision or MigrationDecision value)
        message: Human-readable summary
        task_invoked: Whether an external task was run
        elapsed_seconds: Task duration, when a task was run
        metadata: Extra details (fingerprints, versions, skip reasons)

    Example:
        >>> result = await controller.run()
        >>> if result.aborted:
        ...     print(f"Build failed: {result.message}")
    """

    controller: str = Field(description="Name of controller that produced result")
    status: BuildStatus = Field(description="Outcome kind")
    decision: str | None = Field(default=None, description="Decision taken this build")
    message: str | None = Field(default=None, description="Human-readable summary")
    task_invoked: bool = Field(default=False, description="Whether a task was run")
    elapsed_seconds: float | None = Field(default=None, description="Task duration")
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def ok(self) -> bool:
        """True unless the build must abort."""
        return self.status is not BuildStatus.FAILED

    @property
    def aborted(self) -> bool:
        return self.status is BuildStatus.FAILED


# Helper functions to create results


def success_result(
    controller: str,
    decision: str,
    message: str | None = None,
    *,
    task_invoked: bool = False,
    elapsed_seconds: float | None = None,
    metadata: dict[str, Any] | None = None,
) -> BuildResult:
    """Create success result."""
    return BuildResult(
        controller=controller,
        status=BuildStatus.SUCCESS,
        decision=decision,
        message=message,
        task_invoked=task_invoked,
        elapsed_seconds=elapsed_seconds,
        metadata=metadata or {},
    )


def warning_result(
    controller: str,
    decision: str,
    message: str,
    *,
    task_invoked: bool = False,
    elapsed_seconds: float | None = None,
    metadata: dict[str, Any] | None = None,
) -> BuildResult:
    """Create soft-failure result. The build continues."""
    return BuildResult(
        controller=controller,
        status=BuildStatus.WARNING,
        decision=decision,
        message=message,
        task_invoked=task_invoked,
        elapsed_seconds=elapsed_seconds,
        metadata=metadata or {},
    )


def failure_result(
    controller: str,
    decision: str,
    message: str,
    *,
    task_invoked: bool = False,
    elapsed_seconds: float | None = None,
    metadata: dict[str, Any] | None = None,
) -> BuildResult:
    """Create hard-failure result. The build aborts."""
    return BuildResult(
        controller=controller,
        status=BuildStatus.FAILED,
        decision=decision,
        message=message,
        task_invoked=task_invoked,
        elapsed_seconds=elapsed_seconds,
        metadata=metadata or {},
    )


class BuildReport(BaseModel):
    """Result from a complete build invocation.

    Attributes:
        success: False if any controller failed hard
        results: Controller results in execution order
        total_duration_ms: Total build duration
    """

    success: bool = Field(description="Whether the build completed without a hard failure")
    results: list[BuildResult] = Field(default_factory=list)
    total_duration_ms: float = Field(default=0.0, description="Total duration (ms)")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def warnings(self) -> list[BuildResult]:
        return [r for r in self.results if r.status is BuildStatus.WARNING]

    def get_result(self, controller: str) -> BuildResult:
        """Get result for a controller.

        Raises:
            KeyError: If the controller did not run
        """
        for result in self.results:
            if result.controller == controller:
                return result
        raise KeyError(f"Controller '{controller}' not found in results")
