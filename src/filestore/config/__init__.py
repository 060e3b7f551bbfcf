"""Configuration loading, schema, and defaults."""

from filestore.config.loader import ConfigError, load_config
from filestore.config.schema import FileStoreConfig

__all__ = [
    "ConfigError",
    "FileStoreConfig",
    "load_config",
]
