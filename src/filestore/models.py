"""Data models shared by every backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

RevisionId = str


@dataclass(frozen=True, slots=True)
class Author:
    """Name and email attached to every committed change."""

    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


class ChangeType(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class Change:
    """One resource's status within a revision."""

    type: ChangeType
    path: str

    @classmethod
    def added(cls, path: str) -> "Change":
        return cls(ChangeType.ADDED, path)

    @classmethod
    def modified(cls, path: str) -> "Change":
        return cls(ChangeType.MODIFIED, path)

    @classmethod
    def deleted(cls, path: str) -> "Change":
        return cls(ChangeType.DELETED, path)


@dataclass(frozen=True)
class Revision:
    """An immutable, timestamped, authored snapshot transition of the store."""

    id: RevisionId
    timestamp: datetime
    author: Author
    description: str
    changes: Tuple[Change, ...] = ()

    @property
    def paths(self) -> List[str]:
        return [c.path for c in self.changes]


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """A resource found directly inside a directory of the current snapshot."""

    name: str
    is_directory: bool = False


@dataclass(frozen=True)
class TimeRange:
    """Filter on history queries. ``None`` on either bound means unbounded."""

    since: Optional[datetime] = None
    until: Optional[datetime] = None


@dataclass(frozen=True)
class SearchQuery:
    patterns: List[str] = field(default_factory=list)
    whole_words: bool = True
    match_all: bool = True
    ignore_case: bool = True


@dataclass(frozen=True, slots=True, order=True)
class SearchMatch:
    """A single matching line. Orders by resource name, then line number."""

    resource_name: str
    line_number: int
    line_content: str


@dataclass(frozen=True)
class MergeInfo:
    """Result of a ``modify`` that lost the race against a concurrent update.

    ``base_revision`` is the revision the caller should resubmit against.
    """

    base_revision: Revision
    has_conflicts: bool
    merged_text: str


class LineType(str, Enum):
    UNCHANGED = "unchanged"
    REMOVED = "removed"
    ADDED = "added"


@dataclass(frozen=True, slots=True)
class DiffLine:
    """A single line of a line-level edit script."""

    line_type: LineType
    content: str
