"""The backend-independent store interface.

Every backend implements the primitive operations below. The generic layer
(:mod:`filestore.generic`) builds ``create``, ``modify`` and ``diff`` purely
from these primitives, so it works unchanged over any backend.
"""

from __future__ import annotations

import abc
from typing import List, Optional, Sequence, Union

from filestore.models import (
    Author,
    DirectoryEntry,
    Revision,
    RevisionId,
    SearchMatch,
    SearchQuery,
    TimeRange,
)

Contents = Union[str, bytes]


class FileStore(abc.ABC):
    """A versioned store of named resources."""

    @abc.abstractmethod
    def initialize(self) -> None:
        """Create a new empty store. Raises RepositoryExists if one is there."""

    @abc.abstractmethod
    def save(self, path: str, author: Author, description: str, contents: Contents) -> None:
        """Write *contents* as the full content of *path* and commit it."""

    @abc.abstractmethod
    def retrieve_bytes(self, path: str, revision_id: Optional[RevisionId] = None) -> bytes:
        """Return the raw contents of *path* at *revision_id* (default: latest)."""

    def retrieve(self, path: str, revision_id: Optional[RevisionId] = None) -> str:
        """Return the contents of *path* decoded as UTF-8."""
        return self.retrieve_bytes(path, revision_id).decode("utf-8", errors="replace")

    @abc.abstractmethod
    def delete(self, path: str, author: Author, description: str) -> None:
        ...

    @abc.abstractmethod
    def rename(self, old_path: str, new_path: str, author: Author, description: str) -> None:
        ...

    @abc.abstractmethod
    def latest_revision_id(self, path: str) -> RevisionId:
        """Id of the latest revision touching *path*. Raises NotFound."""

    @abc.abstractmethod
    def get_revision(self, revision_id: RevisionId) -> Revision:
        ...

    @abc.abstractmethod
    def list_index(self) -> List[str]:
        """All live resource paths; empty for a store with no history."""

    @abc.abstractmethod
    def list_directory(self, path: str = "") -> List[DirectoryEntry]:
        ...

    @abc.abstractmethod
    def history(
        self,
        paths: Sequence[str] = (),
        time_range: Optional[TimeRange] = None,
    ) -> List[Revision]:
        """Revisions touching *paths* (all if empty), most recent first."""

    @abc.abstractmethod
    def search(self, query: SearchQuery) -> List[SearchMatch]:
        """Matching lines, ordered by resource name then line number."""

    @abc.abstractmethod
    def ids_match(self, id1: RevisionId, id2: RevisionId) -> bool:
        """True when both ids denote the same snapshot."""
