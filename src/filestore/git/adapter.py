"""Git backend: subprocess wrapper and the GitFileStore adapter."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from filestore.base import Contents, FileStore
from filestore.errors import NotFound, RepositoryExists, Unchanged, UnknownError
from filestore.git.log_parser import (
    LOG_FORMAT,
    LogParseError,
    SearchParseError,
    parse_log,
    parse_search_output,
)
from filestore.hooks.installer import install_post_update_hook
from filestore.models import (
    Author,
    DirectoryEntry,
    Revision,
    RevisionId,
    SearchMatch,
    SearchQuery,
    TimeRange,
)
from filestore.utils import check_resource_name, hashes_match

logger = logging.getLogger(__name__)

_METADATA_DIRS = (".git",)
_NOTHING_TO_COMMIT = (
    "nothing to commit",
    "nothing added to commit",
    "no changes added to commit",
)


@dataclass(frozen=True)
class GitResult:
    """Exit status, decoded stderr, and raw stdout of one git invocation."""

    status: int
    stderr: str
    stdout: bytes

    @property
    def ok(self) -> bool:
        return self.status == 0

    @property
    def text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")


def run_git(
    args: Sequence[str],
    cwd: Path,
    *,
    git: str = "git",
    env: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> GitResult:
    """Run a git command in *cwd*. Never raises on a nonzero exit status."""
    full_env = dict(os.environ)
    full_env["LC_ALL"] = "C"
    # Resource names are file names, never globs or pathspec magic
    full_env["GIT_LITERAL_PATHSPECS"] = "1"
    if env:
        full_env.update(env)

    logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
    try:
        result = subprocess.run(
            [git, *args],
            cwd=cwd,
            env=full_env,
            capture_output=True,
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise UnknownError(f"{git} is not installed or not on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise UnknownError(f"git command timed out after {timeout}s: git {' '.join(args)}") from exc

    return GitResult(
        status=result.returncode,
        stderr=result.stderr.decode("utf-8", errors="replace"),
        stdout=result.stdout,
    )


def _format_git_date(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S +0000")


class GitFileStore(FileStore):
    """A versioned store kept in a git repository with a working tree.

    Every operation is a blocking call to the ``git`` executable with the
    store root as working directory. Nothing is cached between calls.
    """

    def __init__(
        self,
        root: Union[str, Path],
        *,
        git: str = "git",
        timeout: Optional[float] = None,
    ) -> None:
        self.root = Path(root)
        self.git = git
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.root)!r})"

    def _git(self, command: str, *args: str, env: Optional[Dict[str, str]] = None) -> GitResult:
        return run_git([command, *args], self.root, git=self.git, env=env, timeout=self.timeout)

    def _has_head(self) -> bool:
        return self._git("rev-parse", "--verify", "--quiet", "HEAD").ok

    # ---- initialization ----

    def initialize(self) -> None:
        if self.root.exists():
            if not self.root.is_dir() or any(self.root.iterdir()):
                raise RepositoryExists(f"{self.root} already exists")
        self.root.mkdir(parents=True, exist_ok=True)

        result = self._git("init")
        if not result.ok:
            raise UnknownError(f"git init failed:\n{result.stderr}")

        install_post_update_hook(self.root)
        result = self._git("config", "receive.denyCurrentBranch", "ignore")
        if not result.ok:
            raise UnknownError(f"git config failed:\n{result.stderr}")
        logger.info("Initialized git filestore at %s", self.root)

    # ---- writes ----

    def _commit(self, names: Sequence[str], author: Author, description: str) -> None:
        env = {
            "GIT_COMMITTER_NAME": author.name,
            "GIT_COMMITTER_EMAIL": author.email,
        }
        result = self._git(
            "commit", "--no-verify", "--author", str(author), "-m", description, "--", *names,
            env=env,
        )
        if result.ok:
            logger.info("Committed %s (%s)", ", ".join(names), author)
            return

        stderr = result.stderr.strip()
        if not stderr or any(marker in result.text for marker in _NOTHING_TO_COMMIT):
            raise Unchanged(f"No changes to commit for {', '.join(names)}")
        raise UnknownError(f"Could not git commit {' '.join(names)}\n{stderr}")

    def save(self, path: str, author: Author, description: str, contents: Contents) -> None:
        target = check_resource_name(self.root, path, _METADATA_DIRS)
        data = contents.encode("utf-8") if isinstance(contents, str) else contents

        try:
            previous = target.read_bytes() if target.is_file() else None
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise UnknownError(f"Could not write '{path}': {exc}") from exc

        try:
            result = self._git("add", "--", path)
            if not result.ok:
                raise UnknownError(f"Could not git add '{path}'\n{result.stderr}")
            self._commit([path], author, description)
        except UnknownError:
            self._restore(path, target, previous)
            raise

    def _restore(self, path: str, target: Path, previous: Optional[bytes]) -> None:
        """Put *path* back the way it was before a failed save."""
        try:
            if previous is None:
                target.unlink(missing_ok=True)
            else:
                target.write_bytes(previous)
        except OSError as exc:
            logger.warning("Could not restore %s after failed save: %s", path, exc)
        result = self._git("reset", "--quiet", "--", path)
        if not result.ok:
            logger.warning("Could not unstage %s after failed save: %s", path, result.stderr.strip())

    def delete(self, path: str, author: Author, description: str) -> None:
        check_resource_name(self.root, path, _METADATA_DIRS)
        result = self._git("rm", "--", path)
        if not result.ok:
            if "did not match any files" in result.stderr:
                raise NotFound(path)
            raise UnknownError(f"Could not git rm '{path}'\n{result.stderr}")
        self._commit([path], author, description)

    def rename(self, old_path: str, new_path: str, author: Author, description: str) -> None:
        check_resource_name(self.root, old_path, _METADATA_DIRS)
        target = check_resource_name(self.root, new_path, _METADATA_DIRS)
        self._latest_revision_id(old_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise UnknownError(f"Could not create directory for '{new_path}': {exc}") from exc

        result = self._git("mv", "--", old_path, new_path)
        if not result.ok:
            raise UnknownError(f"Could not git mv {old_path} {new_path}\n{result.stderr}")
        self._commit([old_path, new_path], author, description)

    # ---- reads ----

    def retrieve_bytes(self, path: str, revision_id: Optional[RevisionId] = None) -> bytes:
        object_name = f"{revision_id or 'HEAD'}:{path}"

        # Directories are trees, not blobs
        kind = self._git("cat-file", "-t", object_name)
        if not kind.ok or kind.text.strip() != "blob":
            raise NotFound(path)

        result = self._git("cat-file", "-p", object_name)
        if not result.ok:
            raise UnknownError(f"Error in git cat-file:\n{result.stderr}")
        return result.stdout

    def latest_revision_id(self, path: str) -> RevisionId:
        return self._latest_revision_id(path)

    def _latest_revision_id(self, path: str) -> RevisionId:
        rev_list = self._git("rev-list", "--max-count=1", "HEAD", "--", path)
        # rev-list still finds history for deleted resources
        exists = self._git("cat-file", "-e", f"HEAD:{path}")
        if not (rev_list.ok and exists.ok):
            raise NotFound(path)

        rev_id = rev_list.text.strip()
        if not rev_id:
            raise NotFound(path)
        return rev_id.split()[0]

    def _log(self, args: Sequence[str]) -> List[Revision]:
        result = self._git(
            "log", "-z", "--raw", "--no-renames", "--no-color",
            f"--pretty=format:{LOG_FORMAT}", *args,
        )
        if not result.ok:
            raise UnknownError(f"git log returned error status.\n{result.stderr}")
        try:
            return parse_log(result.text)
        except LogParseError as exc:
            raise UnknownError(f"Error parsing git log.\n{exc}") from exc

    def get_revision(self, revision_id: RevisionId) -> Revision:
        if not revision_id or revision_id.startswith("-"):
            raise NotFound(revision_id)
        if not self._git("rev-parse", "--verify", "--quiet", f"{revision_id}^{{commit}}").ok:
            raise NotFound(revision_id)

        revisions = self._log(["--max-count=1", revision_id, "--"])
        if not revisions:
            raise NotFound(revision_id)
        if len(revisions) > 1:
            raise UnknownError(f"git log returned more than one result for {revision_id}")
        return revisions[0]

    def history(
        self,
        paths: Sequence[str] = (),
        time_range: Optional[TimeRange] = None,
    ) -> List[Revision]:
        if not self._has_head():
            return []

        args: List[str] = []
        if time_range is not None:
            if time_range.since is not None:
                args.append(f"--since={_format_git_date(time_range.since)}")
            if time_range.until is not None:
                args.append(f"--until={_format_git_date(time_range.until)}")
        return self._log([*args, "--", *paths])

    def list_index(self) -> List[str]:
        result = self._git("ls-tree", "-r", "-z", "HEAD")
        if not result.ok:
            # A freshly initialized repository has no HEAD yet
            return []

        names: List[str] = []
        for entry in result.text.split("\x00"):
            meta, sep, name = entry.partition("\t")
            if sep and meta.split()[1:2] == ["blob"]:
                names.append(name)
        return names

    def list_directory(self, path: str = "") -> List[DirectoryEntry]:
        directory = path.strip("/")
        if directory:
            check_resource_name(self.root, directory, _METADATA_DIRS)
        if not self._has_head():
            return []

        result = self._git("ls-tree", "-z", f"HEAD:{directory}")
        if not result.ok:
            raise NotFound(path)

        entries: List[DirectoryEntry] = []
        for entry in result.text.split("\x00"):
            meta, sep, name = entry.partition("\t")
            if not sep:
                continue
            kind = meta.split()[1]
            if kind == "blob":
                entries.append(DirectoryEntry(name=name, is_directory=False))
            elif kind == "tree":
                entries.append(DirectoryEntry(name=name, is_directory=True))
            else:
                logger.debug("Skipping %s entry %s in %s", kind, name, directory or "/")
        return entries

    def search(self, query: SearchQuery) -> List[SearchMatch]:
        if not query.patterns:
            return []

        args = ["-I", "-n", "--null", "--no-color", "-F"]
        if query.ignore_case:
            args.append("--ignore-case")
        if query.match_all:
            args.append("--all-match")
        if query.whole_words:
            args.append("--word-regexp")
        for pattern in query.patterns:
            args.extend(["-e", pattern])

        result = self._git("grep", *args)
        if result.status == 1:
            # git grep exits 1 when nothing matched
            return []
        if not result.ok:
            raise UnknownError(f"git grep returned error status.\n{result.stderr}")
        try:
            return parse_search_output(result.text)
        except SearchParseError as exc:
            raise UnknownError(f"Error parsing git grep output.\n{exc}") from exc

    def ids_match(self, id1: RevisionId, id2: RevisionId) -> bool:
        return hashes_match(id1, id2)
