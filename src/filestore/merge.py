"""Three-way merge and line-level diff, independent of any backend.

Both use the same line matcher (``difflib.SequenceMatcher`` with autojunk
off), so a merge and a diff over the same inputs agree on which lines
changed, and the output depends only on the inputs.
"""

from __future__ import annotations

import difflib
from functools import partial
from typing import List, Tuple

from merge3 import Merge3

from filestore.models import DiffLine, LineType
from filestore.utils import split_lines

START_MARKER = "<<<<<<<"
MID_MARKER = "======="
END_MARKER = ">>>>>>>"

line_matcher = partial(difflib.SequenceMatcher, autojunk=False)


def _terminated(lines: List[str]) -> List[str]:
    """Make sure a block ends with a newline before a marker follows it."""
    if lines and not lines[-1].endswith("\n"):
        return [*lines[:-1], lines[-1] + "\n"]
    return lines


def merge_contents(
    label_a: str,
    contents_a: str,
    base: Tuple[str, str],
    latest: Tuple[str, str],
) -> Tuple[bool, str]:
    """Merge *contents_a* and the latest version, both derived from *base*.

    *base* and *latest* are ``(revision_id, contents)`` pairs. Returns
    ``(has_conflicts, merged_text)``; conflicting regions are emitted as::

        <<<<<<< label_a
        ...
        =======
        ...
        >>>>>>> latest_revision_id
    """
    _, base_text = base
    latest_id, latest_text = latest

    merger = Merge3(
        split_lines(base_text),
        split_lines(contents_a),
        split_lines(latest_text),
        sequence_matcher=line_matcher,
    )

    output: List[str] = []
    conflicts = False
    for group in merger.merge_groups():
        kind = group[0]
        if kind == "conflict":
            conflicts = True
            _, _, a_lines, b_lines = group
            if output:
                output = _terminated(output)
            output.append(f"{START_MARKER} {label_a}\n")
            output.extend(_terminated(list(a_lines)))
            output.append(f"{MID_MARKER}\n")
            output.extend(_terminated(list(b_lines)))
            output.append(f"{END_MARKER} {latest_id}\n")
        else:
            # unchanged, a, b, same: a single block of lines to keep
            output.extend(group[1])

    return conflicts, "".join(output)


def diff_lines(old: str, new: str) -> List[DiffLine]:
    """Line-level edit script from *old* to *new*.

    Lines carry their content without the trailing newline.
    """
    old_lines = [line.rstrip("\n") for line in split_lines(old)]
    new_lines = [line.rstrip("\n") for line in split_lines(new)]

    result: List[DiffLine] = []
    matcher = line_matcher(None, old_lines, new_lines)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            result.extend(DiffLine(LineType.UNCHANGED, line) for line in old_lines[i1:i2])
            continue
        if tag in ("replace", "delete"):
            result.extend(DiffLine(LineType.REMOVED, line) for line in old_lines[i1:i2])
        if tag in ("replace", "insert"):
            result.extend(DiffLine(LineType.ADDED, line) for line in new_lines[j1:j2])
    return result
