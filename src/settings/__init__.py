"""Configuration for genref-core."""

from settings.config import (
    CONFIG_FILENAME,
    ConfigError,
    GenrefConfig,
    MetadataConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GenrefConfig",
    "MetadataConfig",
    "load_config",
]
