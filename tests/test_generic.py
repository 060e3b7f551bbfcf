"""Tests for create / modify / diff over a real git store."""

from unittest.mock import MagicMock

import pytest

from filestore.base import FileStore
from filestore.errors import NotFound, ResourceExists, UnknownError
from filestore.generic import create, diff, modify
from filestore.merge import diff_lines
from filestore.models import DiffLine, LineType, MergeInfo

BASE = "a\nb\nc\nd\ne\n"


class TestCreate:
    def test_create_new(self, store, author):
        create(store, "page.txt", author, "add", "hello\n")
        assert store.latest_revision_id("page.txt")
        assert store.retrieve("page.txt") == "hello\n"

    def test_create_twice_fails(self, store, author):
        create(store, "page.txt", author, "add", "hello\n")
        with pytest.raises(ResourceExists):
            create(store, "page.txt", author, "again", "other\n")
        assert store.retrieve("page.txt") == "hello\n"

    def test_create_after_delete(self, store, author):
        create(store, "page.txt", author, "add", "one\n")
        store.delete("page.txt", author, "rm")
        create(store, "page.txt", author, "re-add", "two\n")
        assert store.retrieve("page.txt") == "two\n"

    def test_other_probe_failures_propagate(self, author):
        fake = MagicMock(spec=FileStore)
        fake.latest_revision_id.side_effect = UnknownError("boom")
        with pytest.raises(UnknownError):
            create(fake, "page.txt", author, "add", "x")
        fake.save.assert_not_called()


class TestModify:
    def test_current_revision_saves(self, store, author):
        store.save("page.txt", author, "v1", BASE)
        rev = store.latest_revision_id("page.txt")
        assert modify(store, "page.txt", rev, author, "v2", "new\n") is None
        assert store.retrieve("page.txt") == "new\n"

    def test_short_id_counts_as_current(self, store, author):
        store.save("page.txt", author, "v1", BASE)
        rev = store.latest_revision_id("page.txt")
        assert modify(store, "page.txt", rev[:7], author, "v2", "new\n") is None
        assert store.retrieve("page.txt") == "new\n"

    def test_stale_disjoint_edits_merge_cleanly(self, store, author, other_author):
        store.save("page.txt", author, "v1", BASE)
        stale = store.latest_revision_id("page.txt")
        store.save("page.txt", other_author, "concurrent", "a\nb\nc\nd\nE\n")
        latest = store.latest_revision_id("page.txt")

        result = modify(store, "page.txt", stale, author, "mine", "A\nb\nc\nd\ne\n")

        assert isinstance(result, MergeInfo)
        assert result.has_conflicts is False
        assert result.merged_text == "A\nb\nc\nd\nE\n"
        assert result.base_revision.id == latest
        # nothing was written
        assert store.retrieve("page.txt") == "a\nb\nc\nd\nE\n"
        assert store.latest_revision_id("page.txt") == latest

    def test_stale_overlapping_edits_conflict(self, store, author, other_author):
        store.save("page.txt", author, "v1", "one\ntwo\nthree\n")
        stale = store.latest_revision_id("page.txt")
        store.save("page.txt", other_author, "concurrent", "one\nTWO-B\nthree\n")
        latest = store.latest_revision_id("page.txt")

        result = modify(store, "page.txt", stale, author, "mine", "one\nTWO-A\nthree\n")

        assert result is not None
        assert result.has_conflicts is True
        assert result.merged_text == (
            "one\n"
            "<<<<<<< edited\n"
            "TWO-A\n"
            "=======\n"
            "TWO-B\n"
            f">>>>>>> {latest}\n"
            "three\n"
        )
        assert store.retrieve("page.txt") == "one\nTWO-B\nthree\n"

    def test_resubmit_against_new_latest(self, store, author, other_author):
        store.save("page.txt", author, "v1", BASE)
        stale = store.latest_revision_id("page.txt")
        store.save("page.txt", other_author, "concurrent", "a\nb\nc\nd\nE\n")

        merge = modify(store, "page.txt", stale, author, "mine", "A\nb\nc\nd\ne\n")
        assert merge is not None
        again = modify(store, "page.txt", merge.base_revision.id, author, "resolved", merge.merged_text)
        assert again is None
        assert store.retrieve("page.txt") == "A\nb\nc\nd\nE\n"

    def test_missing_resource(self, store, author):
        with pytest.raises(NotFound):
            modify(store, "nope.txt", "abc", author, "x", "x")


class TestDiff:
    def test_from_empty_document(self, store, author):
        store.save("page.txt", author, "v1", "a\nb\n")
        rev = store.latest_revision_id("page.txt")
        assert diff(store, "page.txt", None, rev) == diff_lines("", "a\nb\n")
        assert all(d.line_type == LineType.ADDED for d in diff(store, "page.txt", None, rev))

    def test_to_current_snapshot(self, store, author):
        store.save("page.txt", author, "v1", "a\nb\nc\n")
        first = store.latest_revision_id("page.txt")
        store.save("page.txt", author, "v2", "a\nB\nc\n")
        second = store.latest_revision_id("page.txt")

        assert diff(store, "page.txt", first, None) == diff(store, "page.txt", first, second)
        assert diff(store, "page.txt", first, None) == [
            DiffLine(LineType.UNCHANGED, "a"),
            DiffLine(LineType.REMOVED, "b"),
            DiffLine(LineType.ADDED, "B"),
            DiffLine(LineType.UNCHANGED, "c"),
        ]

    def test_missing_revision(self, store, author):
        store.save("page.txt", author, "v1", "a\n")
        with pytest.raises(NotFound):
            diff(store, "page.txt", "deadbeefdeadbeef", None)
