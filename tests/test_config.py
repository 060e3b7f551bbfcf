"""Tests for config loading, env var overrides, and backend selection."""

from pathlib import Path

import pytest

from filestore.backends import available_backends, build_store
from filestore.config.defaults import render_config
from filestore.config.loader import ConfigError, load_config
from filestore.git.adapter import GitFileStore
from filestore.git.remote import RemoteGitFileStore


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.store.path == "."
        assert cfg.store.backend == "git"
        assert cfg.git.timeout_seconds is None
        assert cfg.remote.url == ""

    def test_custom_toml(self, tmp_path: Path):
        (tmp_path / ".filestore.toml").write_text(
            '[store]\n'
            'path = "wiki"\n'
            '[git]\n'
            'timeout = 30\n'
            '[author]\n'
            'name = "Jane"\n'
            'email = "jane@example.com"\n'
        )
        cfg = load_config(tmp_path)
        assert cfg.store.path == "wiki"
        assert cfg.git.timeout_seconds == 30
        assert cfg.author.name == "Jane"

    def test_unknown_keys_ignored(self, tmp_path: Path):
        (tmp_path / ".filestore.toml").write_text('[store]\ncolour = "blue"\n')
        assert load_config(tmp_path).store.path == "."

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text('[store]\npath = "elsewhere"\n')
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.store.path == "elsewhere"

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / ".filestore.toml").write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_rendered_starter_config(self, tmp_path: Path):
        (tmp_path / ".filestore.toml").write_text(render_config('stores/"quoted" wiki'))
        cfg = load_config(tmp_path)
        assert cfg.store.path == 'stores/"quoted" wiki'
        assert cfg.remote.url == ""

    def test_negative_timeout_raises(self, tmp_path: Path):
        (tmp_path / ".filestore.toml").write_text("[git]\ntimeout = -5\n")
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestEnvVarOverrides:
    def test_path_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("FILESTORE_PATH", "from-env")
        assert load_config(tmp_path).store.path == "from-env"

    def test_author_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("FILESTORE_AUTHOR_NAME", "Env Author")
        monkeypatch.setenv("FILESTORE_AUTHOR_EMAIL", "env@example.com")
        cfg = load_config(tmp_path)
        assert cfg.author.name == "Env Author"
        assert cfg.author.email == "env@example.com"

    def test_timeout_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("FILESTORE_TIMEOUT", "12")
        assert load_config(tmp_path).git.timeout_seconds == 12

    def test_invalid_timeout_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("FILESTORE_TIMEOUT", "soon")
        assert load_config(tmp_path).git.timeout == 0


class TestBuildStore:
    def test_git_backend(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        cfg.store.path = "wiki"
        fs = build_store(cfg, tmp_path)
        assert type(fs) is GitFileStore
        assert fs.root == (tmp_path / "wiki").resolve()

    def test_remote_backend(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        cfg.remote.url = "https://example.com/wiki.git"
        fs = build_store(cfg, tmp_path)
        assert isinstance(fs, RemoteGitFileStore)
        assert fs.remote.qualified_branch == "origin/master"

    def test_unknown_backend(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        cfg.store.backend = "darcs"  # type: ignore[assignment]
        with pytest.raises(ConfigError):
            build_store(cfg, tmp_path)

    def test_available_backends(self):
        assert available_backends() == ["git"]
