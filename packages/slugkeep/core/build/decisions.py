"""Pure decision policy for the build controllers.

Nothing here touches the filesystem or the environment; every input is
passed in so the policy can be tested on plain values.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from slugkeep.core.build.result import MigrationDecision


def is_assets_cache_fresh(prior_version: str | None, fingerprint: str, force: bool) -> bool:
    """Whether cached assets can be reused as-is.

    A missing or empty prior version, a forced compile, or any difference
    from the current fingerprint makes the cache stale.
    """
    if force or not prior_version:
        return False
    return prior_version == fingerprint


def parse_version(value: str | None) -> int | None:
    """Parse a stored schema version, None if absent or not an integer."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


class MigrationState(StrEnum):
    """Relationship between the recorded and current schema versions."""

    NO_PRIOR_STATE = "no_prior_state"
    IN_SYNC = "in_sync"
    NEEDS_FORWARD = "needs_forward"
    NEEDS_ROLLBACK = "needs_rollback"


def migration_state(recorded: int | None, current: int) -> MigrationState:
    """Classify the store against the code's schema.

    Args:
        recorded: Stored schema version, None when never recorded
        current: Schema version defined by the code being built
    """
    if recorded is None:
        return MigrationState.IN_SYNC if current == 0 else MigrationState.NO_PRIOR_STATE
    if recorded == current:
        return MigrationState.IN_SYNC
    if recorded > current:
        return MigrationState.NEEDS_ROLLBACK
    return MigrationState.NEEDS_FORWARD


class MigrationPlan(BaseModel):
    """Outcome of the migration decision policy.

    Attributes:
        decision: noop, forward or rollback
        recorded: Version being moved away from; for rollbacks, the target
        current: Schema version defined by the code
        forced_rollback: Rollback was triggered by recorded > current rather
            than requested by the caller
    """

    decision: MigrationDecision
    recorded: int
    current: int
    forced_rollback: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def rollback(self) -> bool:
        return self.decision is MigrationDecision.ROLLBACK


def plan_migration(
    recorded: int,
    current: int,
    *,
    rollback_target: int | None = None,
    rollback_requested: bool = False,
    force: bool = False,
) -> MigrationPlan:
    """Decide between no-op, forward migration and rollback.

    Args:
        recorded: Stored schema version (0 when absent)
        current: Schema version defined by the code
        rollback_target: Stored rollback_schema_version, if any
        rollback_requested: Caller hint to roll back
        force: Force flag; bypasses the in-sync no-op

    Example:
        >>> plan_migration(5, 3).decision
        <MigrationDecision.ROLLBACK: 'rollback'>
        >>> plan_migration(0, 7).decision
        <MigrationDecision.FORWARD: 'forward'>
    """
    forced_rollback = recorded > current
    rollback = rollback_requested or forced_rollback

    if rollback and rollback_target is not None:
        recorded = rollback_target

    if rollback:
        decision = MigrationDecision.ROLLBACK
    elif not force and recorded == current:
        decision = MigrationDecision.NOOP
    else:
        decision = MigrationDecision.FORWARD

    return MigrationPlan(
        decision=decision,
        recorded=recorded,
        current=current,
        forced_rollback=forced_rollback and not rollback_requested,
    )
