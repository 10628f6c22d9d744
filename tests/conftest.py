"""Shared fixtures for taskdash tests.

File handling in tests:
- Use tmp_path for any directory or file creation so tests are isolated and cleaned up.
- Use MemoryStorage when a test only cares about what the store writes, not where.
"""

from __future__ import annotations

import itertools
from datetime import date

import pytest

from taskdash import log
from taskdash.storage import MemoryStorage
from taskdash.store import TaskStore
from taskdash.tasks.model import Task, TaskFormInput, TaskPriority, TaskStatus


def _make_task(
    id: str,
    title: str = "",
    description: str = "",
    status: TaskStatus | str = TaskStatus.PENDING,
    priority: TaskPriority | str = TaskPriority.MEDIUM,
    due_date: date | str = date(2024, 1, 1),
) -> Task:
    return Task(
        id=id,
        title=title or f"Task {id}",
        description=description,
        status=TaskStatus(status),
        priority=TaskPriority(priority),
        due_date=date.fromisoformat(due_date) if isinstance(due_date, str) else due_date,
    )


def _make_form(
    title: str = "Task",
    description: str = "",
    status: TaskStatus = TaskStatus.PENDING,
    priority: TaskPriority = TaskPriority.MEDIUM,
    due_date: date | None = date(2024, 1, 1),
) -> TaskFormInput:
    return TaskFormInput(
        title=title,
        description=description,
        status=status,
        priority=priority,
        due_date=due_date,
    )


@pytest.fixture(autouse=True)
def _quiet_debug():
    """Keep verbose mode from leaking between tests."""
    log.set_verbose(False)
    yield
    log.set_verbose(False)


@pytest.fixture
def make_task():
    """Factory fixture that creates Task instances."""
    return _make_task


@pytest.fixture
def make_form():
    """Factory fixture that creates TaskFormInput instances."""
    return _make_form


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def sequential_ids():
    """Deterministic id factory: task-1, task-2, ..."""
    counter = itertools.count(1)
    return lambda: f"task-{next(counter)}"


@pytest.fixture
def store(storage: MemoryStorage, sequential_ids) -> TaskStore:
    """A loaded, empty store backed by in-memory storage."""
    s = TaskStore(storage, id_factory=sequential_ids)
    s.load_initial()
    return s
