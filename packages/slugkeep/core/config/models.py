"""Configuration models for slugkeep."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CONFIG_NAME = "slugkeep.yml"
CUSTOM_BUILD_FILE_NAME = "build.yml"


class ConfigBase(BaseModel):
    """Base class for slugkeep configuration files.

    Provides common functionality for loading from files with defaults.
    """

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    @classmethod
    def default_name(cls) -> str:
        """Return the default file name, looked up in the build directory."""
        raise NotImplementedError(f"{cls.__name__} must implement default_name()")

    @classmethod
    def load_or_default(
        cls, path: Path | str | None = None, *, build_dir: Path | None = None
    ) -> Self:
        """Load config from path, or from the default file in build_dir.

        A missing default file yields an all-defaults instance; an explicit
        path must exist.

        Args:
            path: Explicit config file path
            build_dir: Directory searched for the default file name

        Returns:
            Loaded config instance

        Raises:
            FileNotFoundError: If an explicit path doesn't exist
            ValidationError: If config is invalid
        """
        from slugkeep.core.config.loader import load_config

        if path is None:
            candidate = (build_dir or Path.cwd()) / cls.default_name()
            if not candidate.exists():
                return cls()
            path = candidate

        return cls.model_validate(load_config(path))


class AssetsConfig(BaseModel):
    """Asset pipeline settings."""

    output_dir: str = Field(
        default="public/assets",
        description="Compiled asset directory relative to the build dir, also the cache entry name",
    )
    manifest_name: str = Field(
        default="manifest.yml",
        description="Marker file inside output_dir signalling already-compiled assets",
    )
    source_paths: list[str] = Field(
        default_factory=lambda: [
            "vendor/assets/",
            "app/assets/",
            "config/javascript_translations.yml",
            "config/javascript.yml",
        ],
        description="Ordered asset inputs hashed into the assets fingerprint",
    )
    compile_task: str = Field(default="assets:precompile", description="Compile task name")


class MigrationsConfig(BaseModel):
    """Schema migration settings."""

    schema_path: str = Field(
        default="db/schema.rb", description="Schema definition file, relative to the build dir"
    )
    migrate_task: str = Field(default="db:migrate", description="Forward migration task name")
    rollback_task: str = Field(default="db:rollback", description="Rollback task name")


class TasksConfig(BaseModel):
    """Task runner settings."""

    command: list[str] = Field(
        default_factory=lambda: ["bundle", "exec", "rake"],
        min_length=1,
        description="Command prefix; task names are appended",
    )


class CapabilitiesConfig(BaseModel):
    """Which build cache variants apply to this application."""

    asset_pipeline: bool = Field(default=True, description="Run the asset pipeline controller")
    migrations: bool = Field(default=True, description="Run the migration controller")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Log level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string (ignored for structured logs)",
    )
    structured: bool = Field(default=False, description="Emit JSON log lines")


class BuildConfig(ConfigBase):
    """Top-level slugkeep configuration.

    Example:
        >>> config = BuildConfig.load_or_default(build_dir=Path("/app"))
        >>> config.assets.output_dir
        'public/assets'
    """

    assets: AssetsConfig = Field(default_factory=AssetsConfig)
    migrations: MigrationsConfig = Field(default_factory=MigrationsConfig)
    tasks: TasksConfig = Field(default_factory=TasksConfig)
    capabilities: CapabilitiesConfig = Field(default_factory=CapabilitiesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    metadata_dir: str = Field(
        default="vendor/heroku", description="Metadata directory, relative to the cache dir"
    )
    artifact_dir: str = Field(
        default="artifacts", description="Artifact cache root, relative to the cache dir"
    )

    @classmethod
    def default_name(cls) -> str:
        return DEFAULT_CONFIG_NAME


class CustomBuildConfig(ConfigBase):
    """User-declared custom build file (``build.yml``).

    ``env`` is overlaid on every task environment; ``steps`` maps hook
    names to shell commands. Process type entries are ignored.
    """

    env: dict[str, str] = Field(default_factory=dict)
    steps: dict[str, list[str]] = Field(default_factory=dict)

    @classmethod
    def default_name(cls) -> str:
        return CUSTOM_BUILD_FILE_NAME

    @field_validator("env", mode="before")
    @classmethod
    def _stringify_env(cls, value: object) -> object:
        # YAML scalars such as `yes` or `1` arrive as bool/int
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value

    @field_validator("steps", mode="before")
    @classmethod
    def _drop_empty_hooks(cls, value: object) -> object:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): v or [] for k, v in value.items()}
        return value

    def custom_build_steps(self, hook: str) -> list[str]:
        """Commands registered for hook, empty if none."""
        return list(self.steps.get(hook) or [])
