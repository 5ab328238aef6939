# src/tickbox/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path

from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "tasks.sqlite3"


class TaskStore:
    """
    SQLite task store.

    Schema is a single table created on first use:
    - id is AUTOINCREMENT, so ids of deleted rows are never handed out again
    - is_completed is stored as 0/1

    Thread-safety:
    - each method opens its own SQLite connection, so calls may run on worker threads
    """

    def __init__(self, db_path: str | Path = DEFAULT_DB_NAME) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    description TEXT NOT NULL,
                    is_completed INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            description=str(row["description"]),
            is_completed=bool(row["is_completed"]),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def get_all_tasks(self) -> list[Task]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM tasks ORDER BY id ASC").fetchall()
            return [self._row_to_task(r) for r in rows]
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def insert_task(self, description: str) -> int:
        """Insert a pending task and return its new id."""
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "INSERT INTO tasks(description, is_completed) VALUES (?, 0)",
                (description,),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            logger.debug("Task inserted id=%s", rowid)
            return int(rowid)
        finally:
            conn.close()

    def update_task(self, task: Task) -> bool:
        """
        Overwrite the row matching task.id.

        Returns False (and changes nothing) when the id does not exist.
        """
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "UPDATE tasks SET description = ?, is_completed = ? WHERE id = ?",
                (task.description, int(bool(task.is_completed)), int(task.id)),
            )
            conn.commit()
            found = cur.rowcount == 1
            logger.debug("Task update id=%s found=%s", task.id, found)
            return found
        finally:
            conn.close()

    def delete_task(self, task_id: int) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            found = cur.rowcount == 1
            logger.debug("Task delete id=%s found=%s", task_id, found)
            return found
        finally:
            conn.close()

    def delete_all_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks")
            conn.commit()
            logger.debug("Tasks cleared count=%s", cur.rowcount)
            return int(cur.rowcount)
        finally:
            conn.close()
