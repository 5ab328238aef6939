# src/tickbox/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The service depends on Protocols instead of the concrete SQLite store.
This keeps storage swappable and lets tests run against in-memory fakes.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task
    from ..tasks.task_state import TaskListState


class TaskRepo(Protocol):
    """Durable CRUD over Task records (see TaskStore)."""

    def get_all_tasks(self) -> list[Task]: ...
    def insert_task(self, description: str) -> int: ...
    def update_task(self, task: Task) -> bool: ...
    def delete_task(self, task_id: int) -> bool: ...
    def delete_all_tasks(self) -> int: ...


class TaskListListener(Protocol):
    """Subscriber notified after every change of the observable task list."""

    def __call__(self, state: TaskListState) -> None: ...
