# src/tickbox/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite store, the service and its background loop into AppState,
- performs the initial load of the task list.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.loop_runner import start_service_loop
from ..core.state import AppState
from ..tasks.task_models import InvalidInput, TaskFilter, TaskSort
from ..tasks.task_query import TaskQuery
from ..tasks.task_service import TaskService
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def _initial_query(settings) -> TaskQuery:
    try:
        task_filter = TaskFilter.parse(getattr(settings, "default_filter", ""))
    except InvalidInput:
        logger.warning("Ignoring bad default filter %r", settings.default_filter)
        task_filter = TaskFilter.ALL
    try:
        sort = TaskSort.parse(getattr(settings, "default_sort", ""))
    except InvalidInput:
        logger.warning("Ignoring bad default sort %r", settings.default_sort)
        sort = TaskSort.NAME
    return TaskQuery(filter=task_filter, sort=sort)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    task_store = TaskStore(settings.tasks_db_path)
    service = TaskService(task_store)
    runner = start_service_loop()

    state = AppState(
        settings=settings,
        task_store=task_store,
        service=service,
        runner=runner,
        query=_initial_query(settings),
    )

    try:
        state.run(service.initialize())
    except Exception:
        # The shell still starts; the list stays empty and /status shows the error.
        logger.exception("Initial task load failed.")

    return state


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    # TaskStore uses short-lived sqlite connections per call; no explicit close required.
    try:
        state.runner.stop()
        state.runner.join(timeout=5.0)
    except Exception:
        logger.exception("Failed to stop service loop.")
