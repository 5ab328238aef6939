# src/tickbox/core/state.py

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any, TypeVar

from ..connectors.loop_runner import ServiceLoopRunner
from ..tasks.task_models import Task
from ..tasks.task_query import TaskQuery, apply_query
from ..tasks.task_service import TaskService
from ..tasks.task_store import TaskStore

T = TypeVar("T")


@dataclass
class AppState:
    # Settings object (tickbox.config.Settings or a test stand-in).
    settings: Any

    task_store: TaskStore
    service: TaskService
    runner: ServiceLoopRunner

    # Shell inputs: search text, filter and sort. Never persisted.
    query: TaskQuery = field(default_factory=TaskQuery)

    def run(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run coro on the service loop and wait for it. No timeout: operations always finish."""
        return self.runner.submit(coro)

    def run_store(self, fn: Callable[..., T], *args: Any) -> T:
        """Direct store read, kept off the console thread like every other store call."""
        return self.run(asyncio.to_thread(fn, *args))

    def visible_tasks(self) -> list[Task]:
        return apply_query(self.service.tasks, self.query)
