"""JSON rendering of revisions, search matches, and diffs."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from filestore.models import DiffLine, Revision, SearchMatch


def revision_to_dict(rev: Revision) -> Dict[str, Any]:
    """Convert a Revision to a JSON-serialisable dict."""
    return {
        "id": rev.id,
        "timestamp": rev.timestamp.isoformat(),
        "author": {"name": rev.author.name, "email": rev.author.email},
        "description": rev.description,
        "changes": [{"type": c.type.value, "path": c.path} for c in rev.changes],
    }


def match_to_dict(match: SearchMatch) -> Dict[str, Any]:
    return {
        "resource": match.resource_name,
        "line": match.line_number,
        "content": match.line_content,
    }


def render_revisions(revisions: Sequence[Revision]) -> str:
    """Return formatted JSON string."""
    items: List[Dict[str, Any]] = [revision_to_dict(r) for r in revisions]
    return json.dumps({"revisions": items}, indent=2, ensure_ascii=False)


def render_matches(matches: Sequence[SearchMatch]) -> str:
    return json.dumps(
        {"total_matches": len(matches), "matches": [match_to_dict(m) for m in matches]},
        indent=2,
        ensure_ascii=False,
    )


def render_diff(lines: Sequence[DiffLine]) -> str:
    return json.dumps(
        {"lines": [{"type": d.line_type.value, "content": d.content} for d in lines]},
        indent=2,
        ensure_ascii=False,
    )
