"""filestore: a versioned store of named text resources."""

from filestore.base import FileStore
from filestore.errors import (
    FileStoreError,
    IllegalResourceName,
    NotFound,
    RepositoryExists,
    ResourceExists,
    Unchanged,
    UnknownError,
)
from filestore.generic import create, diff, modify
from filestore.git.adapter import GitFileStore
from filestore.git.remote import Remote, RemoteGitFileStore
from filestore.models import (
    Author,
    Change,
    ChangeType,
    DiffLine,
    DirectoryEntry,
    LineType,
    MergeInfo,
    Revision,
    SearchMatch,
    SearchQuery,
    TimeRange,
)

__version__ = "0.4.0"

__all__ = [
    "Author",
    "Change",
    "ChangeType",
    "DiffLine",
    "DirectoryEntry",
    "FileStore",
    "FileStoreError",
    "GitFileStore",
    "IllegalResourceName",
    "LineType",
    "MergeInfo",
    "NotFound",
    "Remote",
    "RemoteGitFileStore",
    "RepositoryExists",
    "ResourceExists",
    "Revision",
    "SearchMatch",
    "SearchQuery",
    "TimeRange",
    "Unchanged",
    "UnknownError",
    "create",
    "diff",
    "modify",
]
