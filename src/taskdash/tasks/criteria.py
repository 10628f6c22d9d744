"""Holds the transient filter/sort criteria and tells listeners when they change."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from typing import Any

from taskdash import log
from taskdash.tasks.model import (
    FilterCriteria,
    SortOption,
    TaskPriority,
    TaskStatus,
    parse_priority,
    parse_status,
)

CriteriaListener = Callable[[FilterCriteria], None]

# Select-box values that mean "no constraint".
_ANY = {"", "all"}


def _coerce_status(value: Any) -> TaskStatus | None:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in _ANY:
        return None
    return parse_status(value)


def _coerce_priority(value: Any) -> TaskPriority | None:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in _ANY:
        return None
    return parse_priority(value)


def _coerce_search(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"search must be a string, got {type(value).__name__}")
    return value


def _coerce_sort(value: Any) -> SortOption | None:
    option = SortOption.parse(value)
    if option is None and value not in (None, ""):
        log.debug(f"Ignoring unknown sort key {log.plain(repr(value))}")
    return option


_COERCERS: dict[str, Callable[[Any], Any]] = {
    "status": _coerce_status,
    "priority": _coerce_priority,
    "search": _coerce_search,
    "sort": _coerce_sort,
}


class CriteriaController:
    """Owns the current :class:`FilterCriteria`.

    Usage::

        ctl = CriteriaController()
        ctl.subscribe(lambda c: render(get_visible_tasks(store.tasks, c)))
        ctl.on_criteria_change(status="pending")   # other fields kept
        ctl.on_criteria_change(sort="date-asc")
        ctl.on_criteria_change(status=None)        # clear one field
    """

    def __init__(self) -> None:
        self._criteria = FilterCriteria()
        self._listeners: list[CriteriaListener] = []

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    def subscribe(self, listener: CriteriaListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def on_criteria_change(self, **changes: Any) -> FilterCriteria:
        """Merge *changes* into the current criteria and return the result.

        Supplied fields overwrite (``None`` clears), omitted fields are kept.
        """
        unknown = sorted(set(changes) - set(_COERCERS))
        if unknown:
            raise TypeError(f"Unknown criteria field(s): {', '.join(unknown)}")
        coerced = {name: _COERCERS[name](value) for name, value in changes.items()}
        return self._apply(replace(self._criteria, **coerced))

    def set_status(self, value: TaskStatus | str | None) -> FilterCriteria:
        return self.on_criteria_change(status=value)

    def set_priority(self, value: TaskPriority | str | None) -> FilterCriteria:
        return self.on_criteria_change(priority=value)

    def set_search(self, value: str | None) -> FilterCriteria:
        return self.on_criteria_change(search=value)

    def set_sort(self, value: SortOption | str | None) -> FilterCriteria:
        return self.on_criteria_change(sort=value)

    def reset(self) -> FilterCriteria:
        return self._apply(FilterCriteria())

    def _apply(self, new: FilterCriteria) -> FilterCriteria:
        if new == self._criteria:
            return self._criteria
        self._criteria = new
        log.debug(f"Criteria changed: {log.plain(new)}")
        for listener in list(self._listeners):
            listener(new)
        return new
