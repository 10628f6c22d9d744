"""Error taxonomy for the task store, snapshot persistence and form input."""

from __future__ import annotations


class TaskdashError(Exception):
    """Base class for all taskdash errors."""


class ValidationError(TaskdashError, ValueError):
    """A creation request or form field failed validation.

    Raised synchronously at the creation boundary; the store is left untouched.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class PersistenceReadError(TaskdashError):
    """The persisted snapshot is unreadable or malformed."""


class PersistenceWriteError(TaskdashError):
    """The storage backend refused to write the snapshot (quota, I/O, ...)."""
