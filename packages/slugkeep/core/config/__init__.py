"""Configuration models and loaders."""

from slugkeep.core.config.loader import (
    detect_format,
    load_build_config,
    load_config,
    load_custom_build_config,
)
from slugkeep.core.config.models import (
    AssetsConfig,
    BuildConfig,
    CapabilitiesConfig,
    CustomBuildConfig,
    LoggingConfig,
    MigrationsConfig,
    TasksConfig,
)

__all__ = [
    "AssetsConfig",
    "BuildConfig",
    "CapabilitiesConfig",
    "CustomBuildConfig",
    "LoggingConfig",
    "MigrationsConfig",
    "TasksConfig",
    "detect_format",
    "load_build_config",
    "load_config",
    "load_custom_build_config",
]
