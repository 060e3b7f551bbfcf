"""Git backend: the store adapter, output parsers and remote synchronisation."""

from filestore.git.adapter import GitFileStore, GitResult, run_git
from filestore.git.log_parser import (
    GitLogParser,
    LogParseError,
    SearchParseError,
    parse_match_line,
    parse_search_output,
)
from filestore.git.remote import Remote, RemoteGitFileStore

__all__ = [
    "GitFileStore",
    "GitLogParser",
    "GitResult",
    "LogParseError",
    "Remote",
    "RemoteGitFileStore",
    "SearchParseError",
    "parse_match_line",
    "parse_search_output",
    "run_git",
]
