"""Schema migration controller.

Compares the schema version recorded after the last successful migration
with the version defined by the code being built, then migrates forward,
rolls back, or does nothing.
"""

from __future__ import annotations

import logging

from slugkeep.core.build.context import BuildContext
from slugkeep.core.build.decisions import (
    MigrationPlan,
    migration_state,
    parse_version,
    plan_migration,
)
from slugkeep.core.build.environment import migration_environment
from slugkeep.core.build.hooks import Hook
from slugkeep.core.build.result import (
    BuildResult,
    MigrationDecision,
    failure_result,
    success_result,
    warning_result,
)
from slugkeep.core.build.schema import SchemaVersionReader
from slugkeep.core.config.models import MigrationsConfig
from slugkeep.core.metadata import MetadataKey

logger = logging.getLogger(__name__)

EVENT = "db_migrate"


class MigrationController:
    """
    Apply forward migrations or a rollback when the schema version moved.

    A recorded version newer than the code's schema forces a rollback.
    Forward failures abort the build; rollback failures only warn.
    """

    def __init__(
        self,
        context: BuildContext,
        config: MigrationsConfig | None = None,
        schema_reader: SchemaVersionReader | None = None,
        rollback_hint: bool = False,
    ) -> None:
        """
        Initialize controller.

        Args:
            context: Shared build services
            config: Task names and schema location
            schema_reader: Reader for the current schema version
            rollback_hint: Default for run(rollback=...)
        """
        self.context = context
        self.config = config or MigrationsConfig()
        self.schema_reader = schema_reader or SchemaVersionReader(
            context.fs, context.path(self.config.schema_path)
        )
        self.rollback_hint = rollback_hint

    @property
    def name(self) -> str:
        return "migrations"

    async def _read_version(self, key: MetadataKey) -> int | None:
        metadata = self.context.metadata
        if not await metadata.exists(key):
            return None
        raw = await metadata.read(key)
        version = parse_version(raw)
        if version is None:
            logger.warning(f"Ignoring unreadable {key} value: {raw!r}")
        return version

    async def plan(self, rollback: bool = False) -> tuple[MigrationPlan, dict[str, object]]:
        """Read recorded and current versions and decide what to do."""
        stored = await self._read_version(MetadataKey.SCHEMA_VERSION)
        current = await self.schema_reader.read()
        rollback_target = await self._read_version(MetadataKey.ROLLBACK_SCHEMA_VERSION)

        plan = plan_migration(
            stored if stored is not None else 0,
            current,
            rollback_target=rollback_target,
            rollback_requested=rollback,
            force=self.context.environment.force_database_migrations,
        )
        details: dict[str, object] = {
            "state": migration_state(stored, current),
            "recorded": plan.recorded,
            "current": current,
            "forced_rollback": plan.forced_rollback,
        }
        return plan, details

    async def run(self, rollback: bool | None = None) -> BuildResult:
        ctx = self.context
        await ctx.hooks.run(Hook.BEFORE_DATABASE_MIGRATIONS)

        plan, details = await self.plan(self.rollback_hint if rollback is None else rollback)

        if plan.decision is MigrationDecision.NOOP:
            logger.debug(f"Schema version {plan.current} unchanged, skipping migrations")
            return success_result(
                self.name, MigrationDecision.NOOP, "Schema version unchanged", metadata=details
            )

        task = self.config.rollback_task if plan.rollback else self.config.migrate_task
        if not await ctx.tasks.is_defined(task):
            logger.debug(f"{task} not defined, skipping")
            return success_result(
                self.name,
                MigrationDecision.NOOP,
                f"{task} not defined",
                metadata={**details, "reason": "task_not_defined"},
            )

        if plan.rollback:
            logger.info(f"Rolling back database to version {plan.recorded}")
        else:
            logger.info("Running database migrations")

        env = migration_environment(
            ctx.environment,
            ctx.dependencies,
            rollback_version=plan.recorded if plan.rollback else None,
        )
        report = await ctx.tasks.invoke(task, env)

        if not report.success:
            return self._failed(plan, report.elapsed_seconds, details)

        kind = "rollback" if plan.rollback else "migrations"
        logger.info(
            f"Database {kind} completed ({report.elapsed_seconds:.2f}s)",
            extra={"event": EVENT, "status": "success"},
        )

        await ctx.metadata.write(MetadataKey.ROLLBACK_SCHEMA_VERSION, plan.recorded)
        new_version = plan.recorded if plan.rollback else plan.current
        await ctx.metadata.write(MetadataKey.SCHEMA_VERSION, new_version)

        await ctx.hooks.run(Hook.AFTER_DATABASE_MIGRATIONS)

        return success_result(
            self.name,
            plan.decision,
            f"Schema at version {new_version}",
            task_invoked=True,
            elapsed_seconds=report.elapsed_seconds,
            metadata=details,
        )

    def _failed(
        self, plan: MigrationPlan, elapsed: float, details: dict[str, object]
    ) -> BuildResult:
        extra = {"event": EVENT, "status": "failure"}
        if plan.rollback:
            logger.warning("Database rollback failed.", extra=extra)
            return warning_result(
                self.name,
                plan.decision,
                "Database rollback failed.",
                task_invoked=True,
                elapsed_seconds=elapsed,
                metadata=details,
            )

        logger.error("Database migrations failed.", extra=extra)
        return failure_result(
            self.name,
            plan.decision,
            "Database migrations failed.",
            task_invoked=True,
            elapsed_seconds=elapsed,
            metadata=details,
        )
