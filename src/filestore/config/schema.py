"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

Backend = Literal["git"]


@dataclass
class StoreConfig:
    path: str = "."
    backend: Backend = "git"


@dataclass
class GitConfig:
    executable: str = "git"
    timeout: int = 0  # seconds; 0 disables the timeout

    @property
    def timeout_seconds(self) -> Optional[int]:
        return self.timeout if self.timeout > 0 else None


@dataclass
class AuthorConfig:
    name: str = ""
    email: str = ""


@dataclass
class RemoteConfig:
    name: str = "origin"
    branch: str = "master"
    url: str = ""  # empty = no remote synchronisation


@dataclass
class FileStoreConfig:
    store: StoreConfig = field(default_factory=StoreConfig)
    git: GitConfig = field(default_factory=GitConfig)
    author: AuthorConfig = field(default_factory=AuthorConfig)
    remote: RemoteConfig = field(default_factory=RemoteConfig)
