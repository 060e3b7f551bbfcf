"""Backend-independent operations built from the FileStore primitives.

``modify`` carries the optimistic-concurrency contract: a write succeeds only
if the caller's base revision is still the latest one; otherwise the store is
left untouched and the caller gets a merge to resolve and resubmit.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from filestore.base import Contents, FileStore
from filestore.errors import FileStoreError, NotFound, ResourceExists, UnknownError
from filestore.merge import diff_lines, merge_contents
from filestore.models import Author, DiffLine, MergeInfo, RevisionId

logger = logging.getLogger(__name__)

EDITED_LABEL = "edited"


def _as_text(contents: Contents) -> str:
    if isinstance(contents, bytes):
        return contents.decode("utf-8", errors="replace")
    return contents


def create(
    store: FileStore,
    path: str,
    author: Author,
    description: str,
    contents: Contents,
) -> None:
    """Like ``save``, but raise ResourceExists if *path* already has history."""
    try:
        store.latest_revision_id(path)
    except NotFound:
        store.save(path, author, description, contents)
        return
    raise ResourceExists(path)


def modify(
    store: FileStore,
    path: str,
    expected_revision_id: RevisionId,
    author: Author,
    description: str,
    contents: Contents,
) -> Optional[MergeInfo]:
    """Save *contents* if *expected_revision_id* is still the latest revision.

    Returns ``None`` once the new contents are committed. If the resource
    changed since *expected_revision_id*, nothing is written and a MergeInfo
    is returned instead, holding the latest revision and the three-way merge
    of *contents* against it.
    """
    latest_id = store.latest_revision_id(path)
    latest_revision = store.get_revision(latest_id)

    if store.ids_match(expected_revision_id, latest_id):
        store.save(path, author, description, contents)
        return None

    logger.info(
        "Concurrent update of %s: expected %s, latest is %s",
        path, expected_revision_id, latest_id,
    )
    latest_contents = store.retrieve(path, latest_id)
    original_contents = store.retrieve(path, expected_revision_id)
    try:
        has_conflicts, merged_text = merge_contents(
            EDITED_LABEL,
            _as_text(contents),
            (expected_revision_id, original_contents),
            (latest_id, latest_contents),
        )
    except FileStoreError:
        raise
    except Exception as exc:
        raise UnknownError(f"merge of {path} failed: {exc}") from exc

    return MergeInfo(
        base_revision=latest_revision,
        has_conflicts=has_conflicts,
        merged_text=merged_text,
    )


def diff(
    store: FileStore,
    path: str,
    old_revision_id: Optional[RevisionId] = None,
    new_revision_id: Optional[RevisionId] = None,
) -> List[DiffLine]:
    """Line-level diff of *path* between two revisions.

    A missing *old_revision_id* stands for an empty document; a missing
    *new_revision_id* for the current snapshot.
    """
    old = store.retrieve(path, old_revision_id) if old_revision_id is not None else ""
    new = store.retrieve(path, new_revision_id)
    return diff_lines(old, new)
