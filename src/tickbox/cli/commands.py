# src/tickbox/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace

from ..core.state import AppState
from ..tasks.task_models import InvalidInput, Task, TaskFilter, TaskSort

# (state, args, text): text is the raw remainder after the command name, spacing kept.
CommandHandler = Callable[[AppState, list[str], str], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]
        head_and_rest = line[1:].lstrip().split(None, 1)
        text = head_and_rest[1] if len(head_and_rest) > 1 else ""

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args, text)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  (plain text without a leading / adds it as a new task)")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----

def render_tasks(tasks: Iterable[Task]) -> str:
    lines = [f"  [{'x' if t.is_completed else ' '}] #{t.id} {t.description}" for t in tasks]
    if not lines:
        return "  No tasks found."
    return "\n".join(lines)


def render_view(state: AppState) -> str:
    q = state.query
    header = f"Tasks (filter={q.filter.value}, sort={q.sort.value}"
    if q.search:
        header += f", search={q.search!r}"
    header += "):"
    return f"{header}\n{render_tasks(state.visible_tasks())}"


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    raw = args[0].lstrip("#")
    try:
        return int(raw)
    except ValueError:
        return None


def _lookup(state: AppState, args: list[str], usage: str) -> Task | str:
    """Resolve the first arg to a task in the current snapshot, or return a reply line."""
    task_id = _parse_id(args)
    if task_id is None:
        return f"Usage: {usage}"
    task = state.service.find(task_id)
    if task is None:
        return f"No task with id {task_id}."
    return task


# ---- commands ----

def cmd_help(state: AppState, args: list[str], text: str) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], text: str) -> str:
    tasks = state.service.tasks
    done = sum(1 for t in tasks if t.is_completed)
    stored = state.run_store(state.task_store.count_tasks)
    q = state.query
    lines = [
        "Status:",
        f"  Database: {state.task_store.db_path} ({stored} rows stored)",
        f"  Loaded: {'yes' if state.service.state.loaded else 'no'}",
        f"  Tasks: {len(tasks)} total, {done} completed, {len(tasks) - done} pending",
        f"  Query: search={q.search!r} filter={q.filter.value} sort={q.sort.value}",
    ]
    error = state.service.state.error
    if error:
        lines.append(f"  Last error: {error}")
    return "\n".join(lines)


def cmd_list(state: AppState, args: list[str], text: str) -> str:
    return render_view(state)


def cmd_refresh(state: AppState, args: list[str], text: str) -> str:
    state.run(state.service.reload())
    return render_view(state)


def add_task_text(state: AppState, text: str) -> str:
    """Add `text` exactly as typed (used by /add and by plain console lines)."""
    try:
        task_id = state.run(state.service.add_task(text))
    except InvalidInput as e:
        return f"{e} Usage: /add <text>"
    return f"Added task #{task_id}.\n{render_view(state)}"


def cmd_add(state: AppState, args: list[str], text: str) -> str:
    return add_task_text(state, text)


def cmd_show(state: AppState, args: list[str], text: str) -> str:
    """Read one row straight from the database (not the in-memory snapshot)."""
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /show <id>"
    task = state.run_store(state.task_store.get_task, task_id)
    if task is None:
        return f"No task with id {task_id} in the database."
    return render_tasks([task])


def cmd_toggle(state: AppState, args: list[str], text: str) -> str:
    task = _lookup(state, args, "/toggle <id>")
    if isinstance(task, str):
        return task
    if not state.run(state.service.toggle_task_completion(task)):
        return f"Task #{task.id} no longer exists."
    status = "pending" if task.is_completed else "completed"
    return f"Task #{task.id} marked {status}.\n{render_view(state)}"


def cmd_edit(state: AppState, args: list[str], text: str) -> str:
    task = _lookup(state, args, "/edit <id> <text>")
    if isinstance(task, str):
        return task
    id_and_text = text.split(None, 1)
    new_text = id_and_text[1] if len(id_and_text) > 1 else ""
    try:
        found = state.run(state.service.update_task(task, new_text))
    except InvalidInput as e:
        return f"{e} Usage: /edit <id> <text>"
    if not found:
        return f"Task #{task.id} no longer exists."
    return f"Task #{task.id} updated.\n{render_view(state)}"


def cmd_rm(state: AppState, args: list[str], text: str) -> str:
    task = _lookup(state, args, "/rm <id>")
    if isinstance(task, str):
        return task
    if not state.run(state.service.delete_task(task)):
        return f"Task #{task.id} no longer exists."
    return f"Deleted task #{task.id}.\n{render_view(state)}"


def cmd_clear(state: AppState, args: list[str], text: str) -> str:
    removed = state.run(state.service.delete_all_tasks())
    return f"Deleted {removed} task(s)."


def cmd_search(state: AppState, args: list[str], text: str) -> str:
    state.query = replace(state.query, search=text)
    logger.debug("Query changed: %s", state.query)
    prefix = f"Searching for {text!r}." if text else "Search cleared."
    return f"{prefix}\n{render_view(state)}"


def cmd_filter(state: AppState, args: list[str], text: str) -> str:
    try:
        task_filter = TaskFilter.parse(args[0] if args else "")
    except InvalidInput as e:
        return f"{e} Usage: /filter all|completed|pending"
    state.query = replace(state.query, filter=task_filter)
    logger.debug("Query changed: %s", state.query)
    return render_view(state)


def cmd_sort(state: AppState, args: list[str], text: str) -> str:
    try:
        sort = TaskSort.parse(args[0] if args else "")
    except InvalidInput as e:
        return f"{e} Usage: /sort name|date|status"
    state.query = replace(state.query, sort=sort)
    logger.debug("Query changed: %s", state.query)
    return render_view(state)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show database path, totals and current query.")
registry.register("list", cmd_list, help_text="Show tasks for the current query.", aliases=["ls"])
registry.register("refresh", cmd_refresh, help_text="Reload tasks from the database.")
registry.register("show", cmd_show, help_text="Show one stored task: /show <id>.")
registry.register("add", cmd_add, help_text="Add a task: /add <text>.", aliases=["a"])
registry.register(
    "toggle", cmd_toggle, help_text="Flip completed/pending: /toggle <id>.", aliases=["done", "t"]
)
registry.register("edit", cmd_edit, help_text="Change a description: /edit <id> <text>.", aliases=["e"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["del", "delete"])
registry.register("clear", cmd_clear, help_text="Delete all tasks.")
registry.register("search", cmd_search, help_text="Filter by text: /search [text] (empty clears).")
registry.register("filter", cmd_filter, help_text="Status filter: /filter all|completed|pending.")
registry.register("sort", cmd_sort, help_text="Sort order: /sort name|date|status.")
