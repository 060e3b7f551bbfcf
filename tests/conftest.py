"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from filestore.git.adapter import GitFileStore
from filestore.models import Author

_REV_NEW = "b2c3d4e5f60718293a4b5c6d7e8f90a1b2c3d4e5"
_REV_OLD = "a1b2c3d4e5f60718293a4b5c6d7e8f90a1b2c3d4"


@pytest.fixture
def author() -> Author:
    return Author(name="Alice Example", email="alice@example.com")


@pytest.fixture
def other_author() -> Author:
    return Author(name="Bob Example", email="bob@example.com")


@pytest.fixture
def sample_log_two_revisions() -> str:
    """Captured ``git log -z --raw`` output for two commits, newest first."""
    return (
        f"{_REV_NEW}\n"
        "1700000100\n"
        "Bob Example\n"
        "bob@example.com\n"
        "Edit foo\n\nLonger body text.\n\x00\n"
        ":100644 100644 aaaaaaa bbbbbbb M\x00foo.txt\x00"
        ":000000 100644 0000000 ccccccc A\x00dir/bar.txt\x00"
        ":100644 000000 ddddddd 0000000 D\x00old.txt\x00"
        "\x00"
        f"{_REV_OLD}\n"
        "1700000000\n"
        "Alice Example\n"
        "alice@example.com\n"
        "Initial import\n\x00\n"
        ":000000 100644 0000000 eeeeeee A\x00foo.txt\x00"
    )


@pytest.fixture
def sample_log_no_changes() -> str:
    """A commit without file changes followed by a regular one."""
    return (
        f"{_REV_NEW}\n"
        "1700000100\n"
        "Bob Example\n"
        "bob@example.com\n"
        "Empty commit\n\x00"
        "\x00"
        f"{_REV_OLD}\n"
        "1700000000\n"
        "Alice Example\n"
        "alice@example.com\n"
        "Initial import\n\x00\n"
        ":000000 100644 0000000 eeeeeee A\x00foo.txt\x00"
    )


@pytest.fixture
def store(tmp_path: Path) -> GitFileStore:
    """An initialized, empty git filestore."""
    fs = GitFileStore(tmp_path / "store")
    fs.initialize()
    return fs


@pytest.fixture
def search_store(store: GitFileStore, author: Author) -> GitFileStore:
    """A store holding the three resources used by the search scenarios."""
    store.save("foo", author, "add foo", "bing\nbong\nbang\nφ")
    store.save("bar", author, "add bar", "bing BONG")
    store.save("baz", author, "add baz", "bingbang\nbong")
    return store
