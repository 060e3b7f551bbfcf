"""Tests for the JSON and terminal renderers."""

import io
import json
from datetime import datetime, timezone

from rich.console import Console

from filestore.models import (
    Author,
    Change,
    DiffLine,
    DirectoryEntry,
    LineType,
    Revision,
    SearchMatch,
)
from filestore.output import json_report, terminal


def _make_revision() -> Revision:
    return Revision(
        id="a1b2c3d4e5f60718293a4b5c6d7e8f90a1b2c3d4",
        timestamp=datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc),
        author=Author("Alice Example", "alice@example.com"),
        description="Initial import",
        changes=(Change.added("foo.txt"), Change.deleted("old.txt")),
    )


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=160, color_system=None), buf


class TestJsonReport:
    def test_revisions(self):
        data = json.loads(json_report.render_revisions([_make_revision()]))
        rev = data["revisions"][0]
        assert rev["timestamp"] == "2023-11-14T22:13:20+00:00"
        assert rev["author"] == {"name": "Alice Example", "email": "alice@example.com"}
        assert rev["changes"] == [
            {"type": "added", "path": "foo.txt"},
            {"type": "deleted", "path": "old.txt"},
        ]

    def test_matches(self):
        data = json.loads(json_report.render_matches([SearchMatch("foo", 2, "φ")]))
        assert data["total_matches"] == 1
        assert data["matches"][0] == {"resource": "foo", "line": 2, "content": "φ"}

    def test_diff(self):
        data = json.loads(json_report.render_diff([DiffLine(LineType.ADDED, "x")]))
        assert data["lines"] == [{"type": "added", "content": "x"}]


class TestTerminal:
    def test_revisions_table(self):
        console, buf = _console()
        terminal.render_revisions(console, [_make_revision()])
        text = buf.getvalue()
        assert "a1b2c3d4e5" in text
        assert "Initial import" in text
        assert "A foo.txt" in text

    def test_no_revisions(self):
        console, buf = _console()
        terminal.render_revisions(console, [])
        assert "No revisions found" in buf.getvalue()

    def test_matches(self):
        console, buf = _console()
        terminal.render_matches(console, [SearchMatch("bar", 1, "bing BONG")])
        assert "bar:1: bing BONG" in buf.getvalue()

    def test_diff_prefixes(self):
        console, buf = _console()
        terminal.render_diff(console, [
            DiffLine(LineType.UNCHANGED, "a"),
            DiffLine(LineType.REMOVED, "b"),
            DiffLine(LineType.ADDED, "B"),
        ])
        assert buf.getvalue().splitlines() == [" a", "-b", "+B"]

    def test_directory(self):
        console, buf = _console()
        terminal.render_directory(console, [DirectoryEntry("docs", True), DirectoryEntry("a.txt")])
        assert buf.getvalue().splitlines() == ["docs/", "a.txt"]
