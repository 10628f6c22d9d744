"""Task store: the single owner and writer of the task collection."""

from __future__ import annotations

import random
import string
import time
from collections.abc import Callable
from datetime import date
from typing import Any

from taskdash import log
from taskdash.config import STORAGE_KEY, Config
from taskdash.errors import PersistenceReadError, PersistenceWriteError
from taskdash.storage import FileStorage, KeyValueStorage, load_snapshot, save_snapshot
from taskdash.tasks.model import (
    Task,
    TaskFormInput,
    TaskStatus,
    parse_priority,
    parse_status,
    parse_title,
)

_ID_ALPHABET = string.ascii_lowercase + string.digits
_MAX_ID_ATTEMPTS = 100


def generate_task_id() -> str:
    """``task-<ns timestamp>-<9 random base36 chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"task-{time.time_ns()}-{suffix}"


class TaskStore:
    """In-memory task list kept in sync with a persisted snapshot.

    Usage::

        with TaskStore(FileStorage(cfg.data_path)) as store:
            store.load_initial()
            task = store.create_task(form)          # may raise ValidationError
            store.update_status(task.id, TaskStatus.COMPLETED)
            store.delete_task(task.id)

    Every mutation builds a new list and swaps it in, then rewrites the whole
    snapshot. A failed write is logged and reported to *on_persist_error*; the
    in-memory state stays authoritative and ``close()`` retries the write.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = STORAGE_KEY,
        *,
        id_factory: Callable[[], str] = generate_task_id,
        on_persist_error: Callable[[PersistenceWriteError], None] | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._storage = storage
        self._key = key
        self._id_factory = id_factory
        self._on_persist_error = on_persist_error
        self._today = today
        self._tasks: list[Task] = []
        self._issued_ids: set[str] = set()
        self._dirty = False
        self._closed = False

    @classmethod
    def from_config(cls, cfg: Config, **kwargs: Any) -> TaskStore:
        return cls(FileStorage(cfg.data_path), cfg.storage_key, **kwargs)

    # ── lifecycle ────────────────────────────────────────────────

    def load_initial(self) -> list[Task]:
        """Replace the collection with the persisted snapshot. Never raises."""
        try:
            loaded = load_snapshot(self._storage, self._key)
        except PersistenceReadError as exc:
            log.warn(f"Ignoring unreadable task snapshot: {log.plain(exc)}")
            loaded = None
        if loaded is None:
            loaded = []
        self._tasks = loaded
        self._issued_ids.update(t.id for t in loaded)
        self._dirty = False
        log.debug(f"Loaded {len(loaded)} task(s) from {log.plain(self._key)}")
        return list(loaded)

    def close(self) -> None:
        """Flush a pending snapshot (after a failed write) and stop accepting writes."""
        if self._closed:
            return
        if self._dirty:
            self._persist()
        self._closed = True

    @property
    def dirty(self) -> bool:
        """``True`` when the last snapshot write failed."""
        return self._dirty

    def __enter__(self) -> TaskStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ── queries ──────────────────────────────────────────────────

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def all_tasks(self) -> list[Task]:
        return list(self._tasks)

    def get_task(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def __len__(self) -> int:
        return len(self._tasks)

    # ── mutations ────────────────────────────────────────────────

    def create_task(self, form: TaskFormInput) -> Task:
        """Validate *form*, append a new task and persist.

        Raises ``ValidationError`` for an empty (or whitespace-only) title.
        """
        self._check_open()
        title = parse_title(form.title)
        task = Task(
            id=self._new_id(),
            title=title,
            description=form.description,
            status=parse_status(form.status),
            priority=parse_priority(form.priority),
            due_date=form.due_date or self._today(),
        )
        self._tasks = [*self._tasks, task]
        log.debug(f"Task created id={task.id} title={log.plain(task.title)}")
        self._persist()
        return task

    def update_status(self, task_id: str, new_status: TaskStatus) -> None:
        """Set the status of *task_id*. Unknown ids are ignored."""
        self._check_open()
        status = parse_status(new_status)
        for idx, t in enumerate(self._tasks):
            if t.id == task_id:
                break
        else:
            log.debug(f"update_status: no task {log.plain(task_id)}")
            return
        updated = list(self._tasks)
        updated[idx] = t.with_status(status)
        self._tasks = updated
        log.debug(f"Task {task_id}: {t.status.value} -> {status.value}")
        self._persist()

    def delete_task(self, task_id: str) -> None:
        """Remove *task_id*. Unknown ids are ignored."""
        self._check_open()
        remaining = [t for t in self._tasks if t.id != task_id]
        if len(remaining) == len(self._tasks):
            log.debug(f"delete_task: no task {log.plain(task_id)}")
            return
        self._tasks = remaining
        log.debug(f"Task deleted id={log.plain(task_id)}")
        self._persist()

    # ── internals ────────────────────────────────────────────────

    def _new_id(self) -> str:
        for _ in range(_MAX_ID_ATTEMPTS):
            candidate = self._id_factory()
            if candidate not in self._issued_ids:
                self._issued_ids.add(candidate)
                return candidate
        raise RuntimeError(f"Could not generate a unique task id in {_MAX_ID_ATTEMPTS} attempts")

    def _persist(self) -> None:
        try:
            save_snapshot(self._storage, self._key, self._tasks)
        except PersistenceWriteError as exc:
            self._dirty = True
            log.warn(f"Could not save tasks (kept in memory): {log.plain(exc)}")
            if self._on_persist_error is not None:
                self._on_persist_error(exc)
            return
        self._dirty = False

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("TaskStore is closed")

