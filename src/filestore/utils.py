"""Helpers shared by backends."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

from filestore.errors import IllegalResourceName


def check_resource_name(root: Path, name: str, excluded: Iterable[str] = ()) -> Path:
    """Return the absolute path of *name* inside *root*.

    Raises IllegalResourceName when *name* is empty, absolute, escapes *root*
    after normalisation, or lands inside one of the *excluded* directories
    (e.g. the backend's metadata area). Touches nothing on disk.
    """
    if not name or os.path.isabs(name) or name.startswith(("/", "\\")):
        raise IllegalResourceName(f"Illegal resource name: {name!r}")

    base = os.path.normpath(os.path.abspath(root))
    full = os.path.normpath(os.path.join(base, name))
    if full == base or os.path.commonpath([base, full]) != base:
        raise IllegalResourceName(f"Illegal resource name: {name!r}")

    first = os.path.relpath(full, base).split(os.sep, 1)[0]
    if first in set(excluded):
        raise IllegalResourceName(f"Illegal resource name: {name!r}")
    return Path(full)


def hashes_match(id1: str, id2: str) -> bool:
    """True when one hash is a prefix of the other (short vs. full ids)."""
    if not id1 or not id2:
        return id1 == id2
    return id1.startswith(id2) or id2.startswith(id1)


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only, keeping line endings.

    ``str.splitlines`` also breaks on form feeds and other separators, which
    would change content during a merge.
    """
    if not text:
        return []
    lines = text.split("\n")
    result = [line + "\n" for line in lines[:-1]]
    if lines[-1]:
        result.append(lines[-1])
    return result
