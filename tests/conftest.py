# tests/conftest.py

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from types import SimpleNamespace

import pytest

from tickbox.cli.bootstrap import create_initial_state, shutdown_state
from tickbox.core.state import AppState
from tickbox.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than the real Settings,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="tickbox-test",
        log_level="DEBUG",
        console_enabled=False,
        default_filter="all",
        default_sort="name",
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "tasks.sqlite3",
    )


@pytest.fixture()
def task_store(tmp_path: Path) -> TaskStore:
    return TaskStore(tmp_path / "tasks.sqlite3")


@pytest.fixture()
def seeded_store(task_store: TaskStore) -> TaskStore:
    """Store holding [{1,"Buy milk",pending}, {2,"Call mom",done}, {3,"Pay rent",pending}]."""
    task_store.insert_task("Buy milk")
    mom = task_store.insert_task("Call mom")
    task_store.insert_task("Pay rent")
    task = task_store.get_task(mom)
    assert task is not None
    task_store.update_task(replace(task, is_completed=True))
    return task_store


@pytest.fixture()
def state(settings: SimpleNamespace):
    """
    AppState wired through the real bootstrap (SQLite + background service loop).
    """
    app_state: AppState = create_initial_state(settings=settings)
    try:
        yield app_state
    finally:
        shutdown_state(app_state)
