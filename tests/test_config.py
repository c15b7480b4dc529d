from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from durable_copy import config as cfg
from durable_copy.file_io import DEFAULT_BUFFER_SIZE

_ENV_VARS = [env_var for _, env_var in cfg._ENV_OVERRIDES]


@pytest.fixture
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    for env_var in _ENV_VARS:
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.setattr(logging.getLogger("durable_copy"), "propagate", True)
    return tmp_path


def _write_json(path: Path, data: dict[str, object]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


class TestLoadConfig:
    def test_defaults(self, isolated: Path):
        merged = cfg.load_config()
        assert merged["source"] == "source.txt"
        assert merged["destination"] == "destination.txt"
        assert merged["buffer_size"] == DEFAULT_BUFFER_SIZE
        assert merged["debug"] is False
        assert merged["log_file"] == str(isolated / "home" / ".config" / "durable-copy" / "durable_copy.log")

    def test_project_overrides_global(self, isolated: Path):
        _write_json(cfg.config_path(cfg.Scope.GLOBAL), {"source": "g.txt", "destination": "g.out"})
        _write_json(cfg.config_path(cfg.Scope.PROJECT), {"destination": "p.out"})

        merged = cfg.load_config()

        assert merged["source"] == "g.txt"
        assert merged["destination"] == "p.out"

    def test_env_overrides_files(self, isolated: Path, monkeypatch: pytest.MonkeyPatch):
        _write_json(cfg.config_path(cfg.Scope.PROJECT), {"source": "p.txt", "buffer_size": 1024})
        monkeypatch.setenv("DURABLE_COPY_SOURCE", "env.txt")
        monkeypatch.setenv("DURABLE_COPY_BUFFER_SIZE", "4096")
        monkeypatch.setenv("DURABLE_COPY_DEBUG", "TRUE")

        merged = cfg.load_config()

        assert merged["source"] == "env.txt"
        assert merged["buffer_size"] == 4096
        assert merged["debug"] is True

    def test_invalid_env_buffer_size_is_ignored(self, isolated: Path, monkeypatch: pytest.MonkeyPatch, caplog):
        _write_json(cfg.config_path(cfg.Scope.PROJECT), {"buffer_size": 2048})
        monkeypatch.setenv("DURABLE_COPY_BUFFER_SIZE", "lots")

        with caplog.at_level(logging.WARNING, logger="durable_copy.config"):
            merged = cfg.load_config()

        assert merged["buffer_size"] == 2048
        assert "DURABLE_COPY_BUFFER_SIZE" in caplog.text

    def test_non_positive_buffer_size_falls_back_to_default(self, isolated: Path):
        _write_json(cfg.config_path(cfg.Scope.PROJECT), {"buffer_size": 0})
        assert cfg.load_config()["buffer_size"] == DEFAULT_BUFFER_SIZE

    def test_load_raw_config_missing_file(self, isolated: Path):
        assert cfg.load_raw_config(cfg.Scope.GLOBAL) == {}

    def test_string_debug_from_file_is_parsed(self, isolated: Path):
        _write_json(cfg.config_path(cfg.Scope.PROJECT), {"debug": "false"})
        assert cfg.load_config()["debug"] is False

        _write_json(cfg.config_path(cfg.Scope.PROJECT), {"debug": "True"})
        assert cfg.load_config()["debug"] is True

    def test_non_bool_debug_from_file_is_off(self, isolated: Path):
        _write_json(cfg.config_path(cfg.Scope.GLOBAL), {"debug": 1})
        assert cfg.load_config()["debug"] is False

    def test_bool_buffer_size_is_rejected(self, isolated: Path):
        _write_json(cfg.config_path(cfg.Scope.PROJECT), {"buffer_size": True})
        assert cfg.load_config()["buffer_size"] == DEFAULT_BUFFER_SIZE

    def test_log_rotation_settings(self, isolated: Path, monkeypatch: pytest.MonkeyPatch):
        _write_json(cfg.config_path(cfg.Scope.GLOBAL), {"log_max_bytes": 2048, "log_backups": "many"})
        monkeypatch.setenv("DURABLE_COPY_LOG_BACKUPS", "7")

        merged = cfg.load_config()

        assert merged["log_max_bytes"] == 2048
        assert merged["log_backups"] == 7

    def test_negative_log_backups_falls_back_to_default(self, isolated: Path):
        _write_json(cfg.config_path(cfg.Scope.PROJECT), {"log_backups": -1})
        assert cfg.load_config()["log_backups"] == cfg.default_config()["log_backups"]
