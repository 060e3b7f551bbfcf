"""Parsers for git's machine-readable log records and grep matches.

Log records come from::

    git log -z --raw --no-renames --pretty=format:%H%n%ct%n%an%n%ae%n%B%x00

Each record is four newline-terminated header fields (hash, commit epoch,
author name, author email), the description terminated by NUL, then zero or
more raw change entries. With ``-z`` a change entry is the status line
(``:100644 100644 <sha> <sha> M``) and the path, each NUL-terminated.
Records are separated by NUL; stray newlines and NULs between sections are
skipped, since a change entry always starts with ``:`` and a header never does.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from filestore.models import Author, Change, ChangeType, Revision, SearchMatch

logger = logging.getLogger(__name__)

LOG_FORMAT = "%H%n%ct%n%an%n%ae%n%B%x00"

_STATUS_CODES = {
    "A": ChangeType.ADDED,
    "M": ChangeType.MODIFIED,
    "D": ChangeType.DELETED,
}

_SEPARATORS = "\x00\n\r\t "


class LogParseError(Exception):
    """Raised when git log output does not follow the expected record format."""


class SearchParseError(Exception):
    """Raised when a git grep output line cannot be parsed."""


class GitLogParser:
    """Parse ``git log -z --raw`` output into Revision objects.

    Usage::

        revisions = GitLogParser(output).parse()
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def parse(self) -> List[Revision]:
        """Consume records until end of input, most recent first as emitted."""
        revisions: List[Revision] = []
        self._skip_separators()
        while self._pos < len(self._text):
            revisions.append(self._parse_entry())
            self._skip_separators()
        return revisions

    # ---- records ----

    def _parse_entry(self) -> Revision:
        rev_id = self._read_line(nonblank=True)
        date = self._read_line(nonblank=True)
        name = self._read_line()
        email = self._read_line()
        description = self._read_until_nul(allow_eof=False)

        try:
            timestamp = datetime.fromtimestamp(int(date), tz=timezone.utc)
        except (ValueError, OverflowError, OSError) as exc:
            raise LogParseError(f"invalid timestamp {date!r} for revision {rev_id}") from exc

        self._skip_separators()
        changes: List[Change] = []
        while self._peek() == ":":
            changes.append(self._parse_change(rev_id))

        return Revision(
            id=rev_id,
            timestamp=timestamp,
            author=Author(name=name, email=email),
            description=description.rstrip("\n"),
            changes=tuple(changes),
        )

    def _parse_change(self, rev_id: str) -> Change:
        status_line = self._read_until_nul(allow_eof=False)
        path = self._read_until_nul(allow_eof=True)
        if not path:
            raise LogParseError(f"missing path after {status_line!r} in revision {rev_id}")

        code = status_line.rstrip()[-1:]
        change_type = _STATUS_CODES.get(code)
        if change_type is None:
            logger.warning(
                "Unrecognised change status %r for %s in %s; treating as modified",
                code, path, rev_id,
            )
            change_type = ChangeType.MODIFIED
        return Change(change_type, path)

    # ---- low-level scanning ----

    def _peek(self) -> Optional[str]:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return None

    def _read_line(self, nonblank: bool = False) -> str:
        end = self._text.find("\n", self._pos)
        if end == -1:
            raise LogParseError(f"unexpected end of log output at offset {self._pos}")
        line = self._text[self._pos:end]
        if nonblank and not line.strip():
            raise LogParseError(f"blank header field at offset {self._pos}")
        if "\x00" in line:
            raise LogParseError(f"unexpected NUL in header field at offset {self._pos}")
        self._pos = end + 1
        return line

    def _read_until_nul(self, allow_eof: bool) -> str:
        end = self._text.find("\x00", self._pos)
        if end == -1:
            if not allow_eof:
                raise LogParseError(f"unterminated field at offset {self._pos}")
            end = len(self._text)
        value = self._text[self._pos:end]
        self._pos = end + 1
        return value

    def _skip_separators(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos] in _SEPARATORS:
            self._pos += 1


def parse_log(text: str) -> List[Revision]:
    return GitLogParser(text).parse()


# --- git grep ---


def parse_match_line(line: str) -> SearchMatch:
    """Parse one ``git grep -n --null`` line: ``path NUL lineno SEP content``.

    SEP is ``:`` for a single pattern but NUL when ``--all-match`` is used, so
    it is taken as whatever single character follows the digits.
    """
    name, sep, rest = line.partition("\x00")
    if not sep:
        raise SearchParseError(f"missing NUL after file name: {line!r}")

    idx = 0
    while idx < len(rest) and rest[idx] in "0123456789":
        idx += 1
    if idx == 0:
        raise SearchParseError(f"non-numeric line number: {line!r}")

    return SearchMatch(
        resource_name=name,
        line_number=int(rest[:idx]),
        line_content=rest[idx + 1:],
    )


def parse_search_output(text: str) -> List[SearchMatch]:
    """Parse all matches, sorted by resource name then line number."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return sorted(parse_match_line(line) for line in lines)
