# src/tickbox/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from datetime import datetime

from ..cli.commands import add_task_text, render_view
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(state: AppState, line: str) -> str:
    """
    Turn one console line into a reply.

    Slash commands go to the registry; anything else is added as a new task.
    Failures are logged and reported as a single line, the service keeps the
    error on its state for /status.
    """
    try:
        reply = command_registry.handle(state, line)
        if reply is None:
            reply = add_task_text(state, line)
    except Exception:
        logger.exception("Command handler crashed line=%r", line)
        error = state.service.state.error
        return f"Internal error: {error}" if error else "Internal error while handling a command."
    return reply or ""


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")
    print(render_view(state))

    while True:
        try:
            raw = input(">>> ")
            _rewrite_prev_line(f"[{_ts_local()}] >>> {raw}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        user_input = raw.strip()
        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        # Task text goes through untouched, including trailing spaces after a command.
        _print_ts(handle_line(state, raw.lstrip() if user_input.startswith("/") else raw))

    logger.info("Console connector finished.")
