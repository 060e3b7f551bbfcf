"""A git filestore kept in step with a remote repository.

Reads sync down first (fetch, then hard-reset to the remote branch). Writes
sync down, perform the write locally, then push the branch back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from filestore.base import Contents
from filestore.errors import UnknownError
from filestore.git.adapter import GitFileStore
from filestore.models import (
    Author,
    DirectoryEntry,
    Revision,
    RevisionId,
    SearchMatch,
    SearchQuery,
    TimeRange,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Remote:
    name: str
    branch: str
    url: str

    @property
    def qualified_branch(self) -> str:
        return f"{self.name}/{self.branch}"


class RemoteGitFileStore(GitFileStore):
    """GitFileStore whose every operation is synchronised with *remote*."""

    def __init__(
        self,
        root: Union[str, Path],
        remote: Remote,
        *,
        git: str = "git",
        timeout: Optional[float] = None,
    ) -> None:
        super().__init__(root, git=git, timeout=timeout)
        self.remote = remote

    def initialize(self) -> None:
        super().initialize()
        result = self._git("remote", "add", self.remote.name, self.remote.url)
        if not result.ok:
            raise UnknownError(f"git remote add failed:\n{result.stderr}")

    # ---- synchronisation ----

    def fetch(self) -> None:
        result = self._git("fetch", self.remote.name)
        if not result.ok:
            raise UnknownError(f"git fetch failed with error {result.stderr}")

    def checkout_remote(self) -> None:
        result = self._git("checkout", self.remote.branch)
        if not result.ok:
            raise UnknownError(f"git checkout failed with error {result.stderr}")
        result = self._git("reset", "--hard", self.remote.qualified_branch)
        if not result.ok:
            raise UnknownError(f"git reset --hard failed with error {result.stderr}")

    def push_remote(self) -> None:
        result = self._git("push", self.remote.name, self.remote.branch)
        if not result.ok:
            raise UnknownError(f"git push failed with error {result.stderr}")
        logger.info("Pushed %s to %s", self.remote.branch, self.remote.url)

    def sync_down(self) -> None:
        self.fetch()
        self.checkout_remote()

    # ---- writes: sync both ways ----

    def save(self, path: str, author: Author, description: str, contents: Contents) -> None:
        self.sync_down()
        super().save(path, author, description, contents)
        self.push_remote()

    def delete(self, path: str, author: Author, description: str) -> None:
        self.sync_down()
        super().delete(path, author, description)
        self.push_remote()

    def rename(self, old_path: str, new_path: str, author: Author, description: str) -> None:
        self.sync_down()
        super().rename(old_path, new_path, author, description)
        self.push_remote()

    # ---- reads: sync down ----

    def retrieve_bytes(self, path: str, revision_id: Optional[RevisionId] = None) -> bytes:
        self.sync_down()
        return super().retrieve_bytes(path, revision_id)

    def latest_revision_id(self, path: str) -> RevisionId:
        self.sync_down()
        return super().latest_revision_id(path)

    def get_revision(self, revision_id: RevisionId) -> Revision:
        self.sync_down()
        return super().get_revision(revision_id)

    def history(
        self,
        paths: Sequence[str] = (),
        time_range: Optional[TimeRange] = None,
    ) -> List[Revision]:
        self.sync_down()
        return super().history(paths, time_range)

    def list_index(self) -> List[str]:
        self.sync_down()
        return super().list_index()

    def list_directory(self, path: str = "") -> List[DirectoryEntry]:
        self.sync_down()
        return super().list_directory(path)

    def search(self, query: SearchQuery) -> List[SearchMatch]:
        self.sync_down()
        return super().search(query)
