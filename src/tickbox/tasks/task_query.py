# src/tickbox/tasks/task_query.py

from __future__ import annotations

"""
Query pipeline: search -> filter -> sort.

Pure functions over a snapshot of tasks. Nothing here touches the store;
the shell feeds in the service's current list plus its three inputs.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .task_models import Task, TaskFilter, TaskSort

_SORT_KEYS: dict[TaskSort, Callable[[Task], Any]] = {
    TaskSort.NAME: lambda t: t.description,
    TaskSort.DATE: lambda t: t.id,
    TaskSort.STATUS: lambda t: t.is_completed,
}


@dataclass(frozen=True, slots=True)
class TaskQuery:
    search: str = ""
    filter: TaskFilter = TaskFilter.ALL
    sort: TaskSort = TaskSort.NAME


def search_tasks(tasks: Iterable[Task], text: str) -> list[Task]:
    """Case-insensitive substring match on description. Empty text matches all."""
    if not text:
        return list(tasks)
    needle = text.casefold()
    return [t for t in tasks if needle in t.description.casefold()]


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter) -> list[Task]:
    if task_filter == TaskFilter.COMPLETED:
        return [t for t in tasks if t.is_completed]
    if task_filter == TaskFilter.PENDING:
        return [t for t in tasks if not t.is_completed]
    return list(tasks)


def sort_tasks(tasks: Iterable[Task], sort: TaskSort) -> list[Task]:
    # sorted() is stable: ties keep their incoming order.
    key = _SORT_KEYS.get(sort, _SORT_KEYS[TaskSort.DATE])
    return sorted(tasks, key=key)


def apply_query(tasks: Iterable[Task], query: TaskQuery) -> list[Task]:
    found = search_tasks(tasks, query.search)
    found = filter_tasks(found, query.filter)
    return sort_tasks(found, query.sort)
