"""Asset pipeline controller.

Decides whether compiled assets can be restored from the artifact cache or
must be recompiled, and records the fingerprint of what was compiled.
"""

from __future__ import annotations

import logging

from slugkeep.core.build.context import BuildContext
from slugkeep.core.build.decisions import is_assets_cache_fresh
from slugkeep.core.build.environment import FORCE_ASSETS_COMPILATION, compile_environment
from slugkeep.core.build.hooks import Hook
from slugkeep.core.build.result import (
    AssetDecision,
    BuildResult,
    failure_result,
    success_result,
)
from slugkeep.core.caching import ContentFingerprinter, TreeFingerprinter
from slugkeep.core.config.models import AssetsConfig
from slugkeep.core.metadata import MetadataKey
from slugkeep.core.utils.logging import log_duration

logger = logging.getLogger(__name__)

EVENT = "assets_precompile"


class AssetPipelineController:
    """
    Skip, restore or recompute compiled assets.

    Policy, in order:
    1. Restore the cached output directory; if the recorded fingerprint
       matches the current one (and no force flag), stop there.
    2. A manifest already on disk means assets were compiled out-of-band.
    3. No compile task means nothing to do.
    4. Otherwise compile; on success cache the output and record the
       fingerprint, on failure abort the build.
    """

    def __init__(
        self,
        context: BuildContext,
        config: AssetsConfig | None = None,
        fingerprinter: ContentFingerprinter | None = None,
    ) -> None:
        self.context = context
        self.config = config or AssetsConfig()
        self.fingerprinter = fingerprinter or TreeFingerprinter(context.fs, context.build_dir)

    @property
    def name(self) -> str:
        return "assets"

    @property
    def cache_name(self) -> str:
        """Fixed logical name of the cached output directory."""
        return self.config.output_dir.strip("/")

    async def fingerprint(self) -> str:
        with log_duration("assets_fingerprint", logger):
            return await self.fingerprinter.compute(self.config.source_paths)

    async def run(self) -> BuildResult:
        ctx = self.context
        await ctx.hooks.run(Hook.BEFORE_ASSETS_PRECOMPILE)

        fingerprint = await self.fingerprint()
        prior_version = None
        if await ctx.metadata.exists(MetadataKey.ASSETS_VERSION):
            prior_version = await ctx.metadata.read(MetadataKey.ASSETS_VERSION)
        details = {"fingerprint": fingerprint, "prior_version": prior_version}

        if await self.try_restore_from_cache(prior_version, fingerprint):
            return success_result(
                self.name,
                AssetDecision.RESTORE_FROM_CACHE,
                "Assets already cached",
                metadata=details,
            )

        manifest = ctx.path(f"{self.config.output_dir}/{self.config.manifest_name}")
        if await ctx.fs.is_file(manifest):
            logger.info(
                f"Detected {self.config.manifest_name}, assuming assets were compiled locally"
            )
            return success_result(
                self.name,
                AssetDecision.SKIP,
                "Assets compiled out-of-band",
                metadata={**details, "reason": "manifest_present"},
            )

        task = self.config.compile_task
        if not await ctx.tasks.is_defined(task):
            logger.debug(f"{task} not defined, skipping asset compilation")
            return success_result(
                self.name,
                AssetDecision.SKIP,
                f"{task} not defined",
                metadata={**details, "reason": "task_not_defined"},
            )

        logger.info("Preparing app for Rails asset pipeline")
        env = compile_environment(ctx.environment, ctx.dependencies)
        report = await ctx.tasks.invoke(task, env)

        if not report.success:
            logger.error(
                "Precompiling assets failed.", extra={"event": EVENT, "status": "failure"}
            )
            return failure_result(
                self.name,
                AssetDecision.RECOMPUTE,
                "Precompiling assets failed.",
                task_invoked=True,
                elapsed_seconds=report.elapsed_seconds,
                metadata={**details, "exit_code": report.exit_code},
            )

        logger.info(
            f"Asset precompilation completed ({report.elapsed_seconds:.2f}s)",
            extra={"event": EVENT, "status": "success"},
        )

        output_dir = ctx.path(self.config.output_dir)
        if await ctx.fs.is_dir(output_dir):
            await ctx.cache.store(self.cache_name, output_dir)
        else:
            logger.warning(f"{self.config.output_dir} missing after compilation, nothing cached")
        await ctx.metadata.write(MetadataKey.ASSETS_VERSION, fingerprint)

        await ctx.hooks.run(Hook.AFTER_ASSETS_PRECOMPILE)

        return success_result(
            self.name,
            AssetDecision.RECOMPUTE,
            "Assets compiled",
            task_invoked=True,
            elapsed_seconds=report.elapsed_seconds,
            metadata=details,
        )

    async def try_restore_from_cache(self, prior_version: str | None, fingerprint: str) -> bool:
        """Restore cached assets and report whether they are still valid.

        The cached tree is restored whenever an entry exists, so a recompile
        starts from the previous outputs. A matching fingerprint skips
        compilation even when the cache had nothing to restore. When the
        cache is stale, the manifest restored with it is removed so it is
        not mistaken for out-of-band assets.

        Returns:
            True if the fingerprint is fresh and compilation can be skipped
        """
        ctx = self.context
        logger.info("Loading assets cache...")

        output_dir = ctx.path(self.config.output_dir)
        restored = await ctx.cache.load(self.cache_name, output_dir)
        force = ctx.environment.force_assets_compilation

        if is_assets_cache_fresh(prior_version, fingerprint, force):
            logger.info("Assets already cached. Skipping precompilation.")
            logger.warning(f"Use {FORCE_ASSETS_COMPILATION} to force compilation of assets.")
            return True

        # A manifest already on disk without a cache entry counts as out-of-band output
        if restored:
            manifest = ctx.fs.join(output_dir, self.config.manifest_name)
            if await ctx.fs.is_file(manifest):
                await ctx.fs.remove(manifest)

        if force:
            logger.info(f"{FORCE_ASSETS_COMPILATION} set, continuing to precompilation.")
        else:
            logger.info("Assets have changed since the last time, continuing to precompilation.")
        return False
