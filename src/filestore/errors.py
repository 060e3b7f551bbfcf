"""Error kinds raised by every store operation."""

from __future__ import annotations


class FileStoreError(Exception):
    """Base class for all filestore failures."""


class RepositoryExists(FileStoreError):
    """Raised when ``initialize`` targets an already-populated location."""


class NotFound(FileStoreError):
    """Raised when a resource or revision does not exist."""


class ResourceExists(FileStoreError):
    """Raised when ``create`` targets a path that already has history."""


class IllegalResourceName(FileStoreError):
    """Raised when a resource path normalizes outside the store root."""


class Unchanged(FileStoreError):
    """Raised when a write carries the same content as the current version."""


class UnknownError(FileStoreError):
    """Backend tool failure, unparseable output, or unexpected exit status."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail
