# src/tickbox/tasks/task_state.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from ..core.ports import TaskListListener
from .task_models import Task

logger = logging.getLogger(__name__)


class TaskListState:
    """
    Observable snapshot of all tasks, owned by one TaskService.

    - tasks: empty until the first load completes (not an error)
    - error: last user-visible failure, cleared by the next successful change
    - listeners are called synchronously after every change
    """

    def __init__(self) -> None:
        self._tasks: tuple[Task, ...] = ()
        self._loaded = False
        self._error: str | None = None
        self._listeners: list[TaskListListener] = []
        self._lock = threading.Lock()

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def error(self) -> str | None:
        return self._error

    def subscribe(self, listener: TaskListListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def set_tasks(self, tasks: list[Task] | tuple[Task, ...]) -> None:
        self._tasks = tuple(tasks)
        self._loaded = True
        self._error = None
        self._notify()

    def set_error(self, message: str) -> None:
        self._error = message
        self._notify()

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(self)
            except Exception:
                logger.exception("Task list listener failed: %r", listener)
