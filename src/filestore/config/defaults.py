"""Default configuration values and starter .filestore.toml template."""

import json

CONFIG_FILENAME = ".filestore.toml"

DEFAULT_AUTHOR_NAME = "filestore"
DEFAULT_AUTHOR_EMAIL = "filestore@localhost"

_CONFIG_TEMPLATE = """\
# filestore configuration

[store]
path = {path}                # store root, relative to the working directory
backend = "git"

[git]
executable = "git"
timeout = 0               # seconds per git call; 0 = no timeout

[author]
# name = "Jane Doe"
# email = "jane@example.com"

[remote]
# name = "origin"
# branch = "master"
# url = "https://example.com/wiki.git"   # set to sync every operation
"""


def render_config(store_path: str = ".") -> str:
    """Starter .filestore.toml pointing at *store_path*."""
    # JSON string escapes are valid TOML basic-string escapes
    return _CONFIG_TEMPLATE.format(path=json.dumps(store_path))
