"""Tests for taskdash.storage — backends and the snapshot codec."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskdash.config import STORAGE_KEY
from taskdash.errors import PersistenceReadError, PersistenceWriteError
from taskdash.io_utils import read_text, write_text
from taskdash.storage import (
    FileStorage,
    MemoryStorage,
    decode_snapshot,
    encode_snapshot,
    load_snapshot,
    save_snapshot,
)


class TestSnapshotCodec:
    def test_encoded_snapshot_is_json_array_of_records(self, make_task):
        text = encode_snapshot([make_task("t1", title="Buy milk", due_date="2024-01-05")])
        assert json.loads(text) == [{
            "id": "t1",
            "title": "Buy milk",
            "description": "",
            "status": "pending",
            "priority": "medium",
            "dueDate": "2024-01-05",
        }]

    def test_round_trip(self, make_task):
        tasks = [
            make_task("t1", title="Ship release", status="in-progress", priority="high"),
            make_task("t2", title="Ünïcode ✓", description="multi\nline"),
        ]
        assert decode_snapshot(encode_snapshot(tasks)) == tasks

    def test_key_order_does_not_matter(self, make_task):
        record = make_task("t1").to_record()
        shuffled = dict(reversed(list(record.items())))
        assert decode_snapshot(json.dumps([shuffled])) == [make_task("t1")]

    def test_empty_array(self):
        assert decode_snapshot("[]") == []

    @pytest.mark.parametrize("raw", ["", "{", '{"tasks": []}', '"text"'])
    def test_malformed_raises_read_error(self, raw):
        with pytest.raises(PersistenceReadError):
            decode_snapshot(raw)

    def test_deep_nesting_raises_read_error(self):
        with pytest.raises(PersistenceReadError):
            decode_snapshot("[" * 200_000)

    def test_load_missing_key_is_none(self):
        assert load_snapshot(MemoryStorage(), STORAGE_KEY) is None

    def test_save_overwrites(self, make_task):
        storage = MemoryStorage()
        save_snapshot(storage, STORAGE_KEY, [make_task("a"), make_task("b")])
        save_snapshot(storage, STORAGE_KEY, [make_task("c")])
        assert [t.id for t in load_snapshot(storage, STORAGE_KEY)] == ["c"]


class TestMemoryStorage:
    def test_get_set(self):
        storage = MemoryStorage()
        assert storage.get_item("k") is None
        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"
        assert storage.writes == 1

    def test_quota(self):
        storage = MemoryStorage(quota=3)
        with pytest.raises(PersistenceWriteError):
            storage.set_item("k", "toolong")
        assert storage.get_item("k") is None


class TestFileStorage:
    def test_missing_file_is_none(self, tmp_path: Path):
        assert FileStorage(tmp_path / "data").get_item(STORAGE_KEY) is None

    def test_write_then_read(self, tmp_path: Path):
        storage = FileStorage(tmp_path / "data")
        storage.set_item(STORAGE_KEY, "[]")
        assert storage.path_for(STORAGE_KEY) == tmp_path / "data" / "taskdash.tasks.json"
        assert read_text(storage.path_for(STORAGE_KEY)) == "[]"
        assert storage.get_item(STORAGE_KEY) == "[]"

    def test_key_is_sanitised(self, tmp_path: Path):
        assert FileStorage(tmp_path).path_for("../evil key").name == ".._evil_key.json"

    def test_no_temp_files_left(self, tmp_path: Path):
        storage = FileStorage(tmp_path)
        storage.set_item("k", "one")
        storage.set_item("k", "two")
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]
        assert storage.get_item("k") == "two"

    def test_write_error_wrapped(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        write_text(blocker, "not a directory")
        with pytest.raises(PersistenceWriteError):
            FileStorage(blocker / "data").set_item("k", "v")

    def test_stat_error_is_read_error(self, tmp_path: Path, monkeypatch):
        def _denied(self):
            raise PermissionError("stat denied")

        monkeypatch.setattr(Path, "is_file", _denied)
        with pytest.raises(PersistenceReadError):
            FileStorage(tmp_path).get_item("k")

    def test_undecodable_file_is_read_error(self, tmp_path: Path):
        storage = FileStorage(tmp_path)
        storage.path_for("k").write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(PersistenceReadError):
            storage.get_item("k")
