"""post-update hook installer, run when a store is initialized."""

from __future__ import annotations

from pathlib import Path

_HOOK_MARKER = "# filestore-hook"
_HOOK_SCRIPT = f"""\
#!/bin/sh
{_HOOK_MARKER}
# Installed by filestore. Brings the working tree up to date after a push
# into the checked-out branch, so the store reflects changes made remotely.

unset GIT_DIR
cd .. || exit 1
exec git reset --hard --quiet
"""


def _hooks_dir(repo_root: Path) -> Path:
    return repo_root / ".git" / "hooks"


def install_post_update_hook(repo_root: Path) -> Path:
    """Install the post-update hook and return its path.

    Overwrites any hook already present; a freshly initialized store only has
    git's ``.sample`` files.
    """
    hooks_dir = _hooks_dir(repo_root)
    hooks_dir.mkdir(parents=True, exist_ok=True)
    hook_path = hooks_dir / "post-update"

    hook_path.write_text(_HOOK_SCRIPT, encoding="utf-8")
    hook_path.chmod(hook_path.stat().st_mode | 0o755)
    return hook_path


def is_hook_installed(repo_root: Path) -> bool:
    hook_path = _hooks_dir(repo_root) / "post-update"
    if not hook_path.is_file():
        return False
    return _HOOK_MARKER in hook_path.read_text(encoding="utf-8", errors="replace")
