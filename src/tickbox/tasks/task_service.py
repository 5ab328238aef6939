# src/tickbox/tasks/task_service.py

from __future__ import annotations

"""
Task service.

Mediates between the shell and the store and owns the observable task list.

Every mutation is "write, then full reload":
- the write runs on a worker thread (asyncio.to_thread),
- the whole table is read back and replaces the snapshot,
- no incremental patching, so the snapshot always equals the store after a call.

Mutations go through one asyncio.Lock per service. Two calls issued back to back
are applied (and reloaded) strictly in order, so an older reload can never land
after a newer one.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import replace
from typing import TypeVar

from ..core.ports import TaskRepo
from .task_models import InvalidInput, Task
from .task_state import TaskListState

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _check_description(description: str | None) -> str:
    """Reject blank text; otherwise return it exactly as given."""
    if description is None or not description.strip():
        raise InvalidInput("Task description must not be blank.")
    return description


class TaskService:
    def __init__(self, repo: TaskRepo, *, state: TaskListState | None = None) -> None:
        self._repo = repo
        self._state = state or TaskListState()
        self._lock = asyncio.Lock()

    @property
    def state(self) -> TaskListState:
        return self._state

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._state.tasks

    def find(self, task_id: int) -> Task | None:
        """Look up a task in the current snapshot (no store round-trip)."""
        for task in self._state.tasks:
            if task.id == task_id:
                return task
        return None

    # ---- internals ----

    async def _write_then_reload(self, op: str, write: Callable[[], T]) -> T:
        async with self._lock:
            try:
                result = await asyncio.to_thread(write)
                tasks = await asyncio.to_thread(self._repo.get_all_tasks)
            except Exception as e:
                logger.exception("Task operation failed op=%s", op)
                self._state.set_error(f"Could not {op}: {e}")
                raise
            self._state.set_tasks(tasks)
            return result

    # ---- public API ----

    async def initialize(self) -> None:
        """Load every stored task into the observable list."""
        await self.reload()
        logger.info("TaskService loaded %d tasks", len(self._state.tasks))

    async def reload(self) -> None:
        async with self._lock:
            try:
                tasks = await asyncio.to_thread(self._repo.get_all_tasks)
            except Exception as e:
                logger.exception("Task reload failed")
                self._state.set_error(f"Could not load tasks: {e}")
                raise
            self._state.set_tasks(tasks)

    async def add_task(self, description: str) -> int:
        text = _check_description(description)
        task_id = await self._write_then_reload("add task", lambda: self._repo.insert_task(text))
        logger.info("Task added id=%s", task_id)
        return task_id

    async def toggle_task_completion(self, task: Task) -> bool:
        updated = replace(task, is_completed=not task.is_completed)
        found = await self._write_then_reload("update task", lambda: self._repo.update_task(updated))
        if not found:
            logger.warning("Toggle ignored: task id=%s no longer exists", task.id)
        return found

    async def update_task(self, task: Task, new_description: str) -> bool:
        updated = replace(task, description=_check_description(new_description))
        found = await self._write_then_reload("update task", lambda: self._repo.update_task(updated))
        if not found:
            logger.warning("Edit ignored: task id=%s no longer exists", task.id)
        return found

    async def delete_task(self, task: Task) -> bool:
        found = await self._write_then_reload("delete task", lambda: self._repo.delete_task(task.id))
        if not found:
            logger.warning("Delete ignored: task id=%s no longer exists", task.id)
        return found

    async def delete_all_tasks(self) -> int:
        async with self._lock:
            try:
                removed = await asyncio.to_thread(self._repo.delete_all_tasks)
            except Exception as e:
                logger.exception("Task operation failed op=delete all tasks")
                self._state.set_error(f"Could not delete all tasks: {e}")
                raise
            # Result is known; skip the reload round-trip.
            self._state.set_tasks(())
        logger.info("All tasks deleted count=%s", removed)
        return removed
