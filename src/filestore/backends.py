"""Backend registry — maps a configured backend name to a FileStore factory."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List

from filestore.base import FileStore
from filestore.config.loader import ConfigError
from filestore.config.schema import FileStoreConfig
from filestore.git.adapter import GitFileStore
from filestore.git.remote import Remote, RemoteGitFileStore

StoreFactory = Callable[[Path, FileStoreConfig], FileStore]


def _git_store(root: Path, config: FileStoreConfig) -> FileStore:
    git = config.git.executable
    timeout = config.git.timeout_seconds
    if config.remote.url:
        remote = Remote(
            name=config.remote.name,
            branch=config.remote.branch,
            url=config.remote.url,
        )
        return RemoteGitFileStore(root, remote, git=git, timeout=timeout)
    return GitFileStore(root, git=git, timeout=timeout)


_BACKENDS: Dict[str, StoreFactory] = {
    "git": _git_store,
}


def available_backends() -> List[str]:
    return sorted(_BACKENDS)


def build_store(config: FileStoreConfig, base_dir: Path) -> FileStore:
    """Instantiate the configured backend. ``store.path`` is relative to *base_dir*."""
    factory = _BACKENDS.get(config.store.backend)
    if factory is None:
        raise ConfigError(
            f"Unknown backend {config.store.backend!r} "
            f"(available: {', '.join(available_backends())})"
        )
    root = (base_dir / config.store.path).resolve()
    return factory(root, config)
