"""Tests for taskdash.config.Config defaults and env overrides."""

from __future__ import annotations

from pathlib import Path

from taskdash import __version__
from taskdash.config import DEFAULT_DATA_DIR, STORAGE_KEY, VERSION, Config
from taskdash.storage import FileStorage
from taskdash.store import TaskStore


def test_storage_key_is_fixed_and_versionless():
    assert STORAGE_KEY == "taskdash.tasks"
    assert Config().storage_key == STORAGE_KEY


def test_default_data_dir_when_env_not_set(monkeypatch):
    monkeypatch.delenv("TASKDASH_HOME", raising=False)
    cfg = Config()
    assert cfg.data_dir == DEFAULT_DATA_DIR
    assert cfg.data_path == Path(DEFAULT_DATA_DIR).expanduser()


def test_env_overrides_data_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("TASKDASH_HOME", str(tmp_path))
    assert Config().data_path == tmp_path


def test_explicit_data_dir_wins(monkeypatch, tmp_path):
    monkeypatch.setenv("TASKDASH_HOME", "/elsewhere")
    assert Config(data_dir=str(tmp_path)).data_path == tmp_path


def test_empty_storage_key_falls_back():
    assert Config(storage_key="").storage_key == STORAGE_KEY


def test_version_exported():
    assert __version__ == VERSION


def test_store_from_config_uses_data_dir(tmp_path, make_form):
    cfg = Config(data_dir=str(tmp_path))
    with TaskStore.from_config(cfg) as store:
        store.create_task(make_form(title="x"))
    assert FileStorage(tmp_path).get_item(STORAGE_KEY) is not None
