"""Task, form input and filter criteria models shared by the store and engine."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any

from taskdash.errors import ValidationError


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.LOW: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.HIGH: 3,
}


class SortOption(str, Enum):
    TITLE_ASC = "title-asc"
    TITLE_DESC = "title-desc"
    DATE_ASC = "date-asc"
    DATE_DESC = "date-desc"
    PRIORITY_HIGH_FIRST = "priority-high-first"
    PRIORITY_LOW_FIRST = "priority-low-first"

    @classmethod
    def parse(cls, raw: object) -> SortOption | None:
        """Return the matching option, or ``None`` for unknown/empty input.

        Accepts the short ``priority-high`` / ``priority-low`` spellings too.
        """
        if isinstance(raw, SortOption):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            return None
        value = raw.strip().lower()
        value = _SORT_ALIASES.get(value, value)
        try:
            return cls(value)
        except ValueError:
            return None


_SORT_ALIASES: dict[str, str] = {
    "priority-high": SortOption.PRIORITY_HIGH_FIRST.value,
    "priority-low": SortOption.PRIORITY_LOW_FIRST.value,
}


# ── Entities ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: date

    def with_status(self, status: TaskStatus) -> Task:
        return replace(self, status=status)

    def to_record(self) -> dict[str, str]:
        """Snapshot record, keyed the way the stored JSON expects."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "dueDate": self.due_date.isoformat(),
        }

    @classmethod
    def from_record(cls, raw: Any) -> Task:
        """Build a Task from a snapshot record.

        Raises ``ValidationError`` when a field is missing or has the wrong shape.
        """
        if not isinstance(raw, dict):
            raise ValidationError("record", f"expected an object, got {type(raw).__name__}")
        task_id = raw.get("id")
        if not isinstance(task_id, str) or not task_id:
            raise ValidationError("id", "id must be a non-empty string")
        description = raw.get("description", "")
        if not isinstance(description, str):
            raise ValidationError("description", "description must be a string")
        return cls(
            id=task_id,
            title=parse_title(raw.get("title")),
            description=description,
            status=parse_status(raw.get("status")),
            priority=parse_priority(raw.get("priority")),
            due_date=parse_due_date(raw.get("dueDate")),
        )


@dataclass(frozen=True)
class TaskFormInput:
    """A creation request, as submitted by the presentation layer."""

    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None


@dataclass(frozen=True)
class FilterCriteria:
    """Transient filter/sort selection. ``None`` means no constraint."""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = None
    sort: SortOption | None = None

    def is_empty(self) -> bool:
        return self == FilterCriteria()


# ── Field parsing ────────────────────────────────────────────────────


def parse_title(value: object) -> str:
    if not isinstance(value, str):
        raise ValidationError("title", "Task title is required")
    if not value.strip():
        raise ValidationError("title", "Task title is required")
    return value


def parse_status(value: object) -> TaskStatus:
    if isinstance(value, TaskStatus):
        return value
    try:
        return TaskStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise ValidationError("status", f"Unknown status {value!r}. Valid: {allowed}.") from None


def parse_priority(value: object) -> TaskPriority:
    if isinstance(value, TaskPriority):
        return value
    try:
        return TaskPriority(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(p.value for p in TaskPriority)
        raise ValidationError("priority", f"Unknown priority {value!r}. Valid: {allowed}.") from None


def parse_due_date(value: object) -> date:
    # datetime is a date subclass; keep only the calendar part.
    if isinstance(value, date):
        return date(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError("due_date", f"Due date must be an ISO date (YYYY-MM-DD), got {value!r}")


# ── Form builder ─────────────────────────────────────────────────────


class TaskFormBuilder:
    """Collects a creation request one field at a time.

    Each setter validates its own field, so a bad value is rejected where it is
    entered rather than when the task is created::

        form = TaskFormBuilder().set_title("Buy milk").set_priority("low")
        store.create_task(form.build())

    The title is only checked for emptiness by ``TaskStore.create_task``; an
    empty title is a legitimate intermediate state while a form is being filled.
    """

    def __init__(self, today: date | None = None) -> None:
        self._today = today
        self.reset()

    def reset(self) -> TaskFormBuilder:
        self._title = ""
        self._description = ""
        self._status = TaskStatus.PENDING
        self._priority = TaskPriority.MEDIUM
        self._due_date = self._today or date.today()
        return self

    def set_title(self, value: str) -> TaskFormBuilder:
        if not isinstance(value, str):
            raise ValidationError("title", "title must be a string")
        self._title = value
        return self

    def set_description(self, value: str) -> TaskFormBuilder:
        if not isinstance(value, str):
            raise ValidationError("description", "description must be a string")
        self._description = value
        return self

    def set_status(self, value: TaskStatus | str) -> TaskFormBuilder:
        self._status = parse_status(value)
        return self

    def set_priority(self, value: TaskPriority | str) -> TaskFormBuilder:
        self._priority = parse_priority(value)
        return self

    def set_due_date(self, value: date | str) -> TaskFormBuilder:
        self._due_date = parse_due_date(value)
        return self

    def build(self) -> TaskFormInput:
        return TaskFormInput(
            title=self._title,
            description=self._description,
            status=self._status,
            priority=self._priority,
            due_date=self._due_date,
        )
