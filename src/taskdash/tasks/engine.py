"""Filter/sort engine: derives the visible task list from tasks and criteria.

Every function here is pure. The input sequence is never mutated and a new
list is always returned. Sorting uses Python's stable ``sorted`` (also with
``reverse=True``), so tasks that compare equal keep their filtered order.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Callable, Sequence
from datetime import date
from typing import Any

from taskdash.tasks.model import FilterCriteria, SortOption, Task


def normalize_search(search: str | None) -> str | None:
    """Trim *search*; blank text counts as no search at all."""
    if search is None:
        return None
    text = search.strip()
    return text or None


def matches(task: Task, criteria: FilterCriteria) -> bool:
    """Return ``True`` when *task* satisfies every specified criterion."""
    if criteria.status is not None and task.status != criteria.status:
        return False
    if criteria.priority is not None and task.priority != criteria.priority:
        return False
    needle = normalize_search(criteria.search)
    if needle is not None:
        needle = needle.casefold()
        if needle not in task.title.casefold() and needle not in task.description.casefold():
            return False
    return True


def filter_tasks(tasks: Sequence[Task], criteria: FilterCriteria) -> list[Task]:
    return [t for t in tasks if matches(t, criteria)]


def _collation_base(text: str) -> str:
    """Case-folded *text* with accents removed: "\u00c9clair" -> "eclair"."""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _title_key(task: Task) -> tuple[str, str]:
    # Primary level ignores accents and case; the folded title breaks those ties.
    folded = task.title.casefold()
    return _collation_base(folded), folded


def _date_key(task: Task) -> date:
    return task.due_date


def _rank_key(task: Task) -> int:
    return task.priority.rank


# sort option -> (key, reverse)
_SORTS: dict[SortOption, tuple[Callable[[Task], Any], bool]] = {
    SortOption.TITLE_ASC: (_title_key, False),
    SortOption.TITLE_DESC: (_title_key, True),
    SortOption.DATE_ASC: (_date_key, False),
    SortOption.DATE_DESC: (_date_key, True),
    SortOption.PRIORITY_HIGH_FIRST: (_rank_key, True),
    SortOption.PRIORITY_LOW_FIRST: (_rank_key, False),
}


def sort_tasks(tasks: Sequence[Task], sort: SortOption | str | None) -> list[Task]:
    """Return *tasks* ordered by *sort*; unknown or missing keys keep input order."""
    option = SortOption.parse(sort)
    if option is None:
        return list(tasks)
    key, reverse = _SORTS[option]
    return sorted(tasks, key=key, reverse=reverse)


def get_visible_tasks(all_tasks: Sequence[Task], criteria: FilterCriteria) -> list[Task]:
    """Filter then sort *all_tasks* for display."""
    visible = filter_tasks(all_tasks, criteria)
    if criteria.sort is not None:
        visible = sort_tasks(visible, criteria.sort)
    return visible
