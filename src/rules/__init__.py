"""Build configuration for modpack-core."""

from rules.config import (
    CONFIG_FILENAME,
    BundleConfig,
    ConfigError,
    load_config,
    resolve_output_path,
)

__all__ = [
    "CONFIG_FILENAME",
    "BundleConfig",
    "ConfigError",
    "load_config",
    "resolve_output_path",
]
