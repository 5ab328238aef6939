# src/tickbox/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class InvalidInput(ValueError):
    """Rejected user input (blank description, unknown filter/sort name)."""


@dataclass(frozen=True, slots=True)
class Task:
    """
    A single to-do item.

    Notes:
    - id is assigned by the store and never reused after deletion.
    - there is no creation timestamp; id order stands in for creation order.
    """

    id: int
    description: str
    is_completed: bool = False


class TaskFilter(StrEnum):
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"

    @classmethod
    def parse(cls, raw: str | None) -> TaskFilter:
        if not raw or not raw.strip():
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            raise InvalidInput(f"Unknown filter: {raw!r}") from None


class TaskSort(StrEnum):
    NAME = "name"
    DATE = "date"  # id ascending
    STATUS = "status"  # pending first

    @classmethod
    def parse(cls, raw: str | None) -> TaskSort:
        if not raw or not raw.strip():
            return cls.NAME
        try:
            return cls(raw.strip().lower())
        except ValueError:
            raise InvalidInput(f"Unknown sort: {raw!r}") from None
