"""Key/value storage backends and the JSON task snapshot codec.

The snapshot is a JSON array of task records stored under one fixed key.
It is always rewritten in full; there is no incremental update.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from taskdash import log
from taskdash.errors import PersistenceReadError, PersistenceWriteError, ValidationError
from taskdash.io_utils import atomic_write_text, read_text
from taskdash.tasks.model import Task


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage. Optional *quota* (in characters) mimics a full store."""

    def __init__(self, items: dict[str, str] | None = None, quota: int | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})
        self.quota = quota
        self.writes = 0

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota is not None and len(value) > self.quota:
            raise PersistenceWriteError(
                f"Quota exceeded writing {key!r}: {len(value)} > {self.quota} chars"
            )
        self.items[key] = value
        self.writes += 1


class FileStorage:
    """One UTF-8 file per key under *root*, written atomically."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        safe = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in key)
        return self.root / f"{safe}.json"

    def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            if not path.is_file():
                return None
            return read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceReadError(f"Cannot read {path}: {exc}") from exc

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            atomic_write_text(path, value)
        except OSError as exc:
            raise PersistenceWriteError(f"Cannot write {path}: {exc}") from exc


# ── Snapshot codec ───────────────────────────────────────────────────


def encode_snapshot(tasks: Iterable[Task]) -> str:
    return json.dumps([t.to_record() for t in tasks], ensure_ascii=False, indent=2)


def decode_snapshot(text: str) -> list[Task]:
    """Parse a snapshot into tasks.

    Raises ``PersistenceReadError`` when the text is not a JSON array. Records
    that fail validation, or repeat an earlier id, are skipped with a warning.
    """
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise PersistenceReadError(f"Snapshot is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise PersistenceReadError(
            f"Snapshot must be a JSON array, got {type(data).__name__}"
        )

    tasks: list[Task] = []
    seen: set[str] = set()
    for idx, raw in enumerate(data):
        try:
            task = Task.from_record(raw)
        except ValidationError as exc:
            log.warn(f"Skipping snapshot record #{idx}: {log.plain(exc)}")
            continue
        if task.id in seen:
            log.warn(f"Skipping snapshot record #{idx}: duplicate id {log.plain(task.id)}")
            continue
        seen.add(task.id)
        tasks.append(task)
    return tasks


def load_snapshot(storage: KeyValueStorage, key: str) -> list[Task] | None:
    """Return the stored tasks, or ``None`` when nothing is stored under *key*."""
    text = storage.get_item(key)
    if text is None:
        return None
    return decode_snapshot(text)


def save_snapshot(storage: KeyValueStorage, key: str, tasks: Iterable[Task]) -> None:
    storage.set_item(key, encode_snapshot(tasks))
