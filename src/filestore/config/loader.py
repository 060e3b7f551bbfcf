"""Load and merge configuration from .filestore.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from filestore.config.defaults import CONFIG_FILENAME
from filestore.config.schema import (
    AuthorConfig,
    FileStoreConfig,
    GitConfig,
    RemoteConfig,
    StoreConfig,
)


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(start: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = start / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _merge_env_overrides(cfg: FileStoreConfig) -> None:
    """Apply FILESTORE_* environment variable overrides."""
    if val := os.environ.get("FILESTORE_PATH"):
        cfg.store.path = val
    if val := os.environ.get("FILESTORE_GIT"):
        cfg.git.executable = val
    if val := os.environ.get("FILESTORE_TIMEOUT"):
        try:
            cfg.git.timeout = int(val)
        except ValueError:
            pass
    if val := os.environ.get("FILESTORE_AUTHOR_NAME"):
        cfg.author.name = val
    if val := os.environ.get("FILESTORE_AUTHOR_EMAIL"):
        cfg.author.email = val


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.get(section, {}).items() if k in valid_fields}
    return cls(**filtered)


def load_config(
    start: Path,
    config_override: Optional[str] = None,
) -> FileStoreConfig:
    """Load, validate, and return a FileStoreConfig."""
    config_path = find_config_file(start, config_override)

    if config_path is None:
        cfg = FileStoreConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = FileStoreConfig(
            store=_build_section(raw, StoreConfig, "store"),
            git=_build_section(raw, GitConfig, "git"),
            author=_build_section(raw, AuthorConfig, "author"),
            remote=_build_section(raw, RemoteConfig, "remote"),
        )
        if not isinstance(cfg.git.timeout, int) or cfg.git.timeout < 0:
            raise ConfigError(f"git.timeout must be a non-negative integer in {config_path}")

    _merge_env_overrides(cfg)
    return cfg
