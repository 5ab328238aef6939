# src/tickbox/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a default, so the app starts with an empty environment.
- Local safe overrides may live in a gitignored config_local.py.

Environment variables (prefix TICKBOX_):
- TICKBOX_APP_NAME            display name (default: tickbox)
- TICKBOX_LOG_LEVEL           console log level (default: INFO)
- TICKBOX_CONSOLE_ENABLED     run the console REPL (default: true)
- TICKBOX_DATA_DIR            local data directory (default: .local/tickbox)
- TICKBOX_TASKS_DB_PATH       SQLite file (default: <data_dir>/tasks.sqlite3)
- TICKBOX_DEFAULT_FILTER      initial filter: all | completed | pending
- TICKBOX_DEFAULT_SORT        initial sort: name | date | status
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .tasks.task_store import DEFAULT_DB_NAME

logger = logging.getLogger(__name__)

ENV_PREFIX = "TICKBOX"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Shell ----
    console_enabled: bool
    default_filter: str
    default_sort: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "tickbox").strip() or "tickbox"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        default_filter = _env(_k("DEFAULT_FILTER"), "all").strip().lower()
        default_sort = _env(_k("DEFAULT_SORT"), "name").strip().lower()

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tickbox"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / DEFAULT_DB_NAME)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            default_filter=default_filter,
            default_sort=default_sort,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
        )


def _apply_local_overrides(settings: Settings) -> Settings:
    """Apply a gitignored config_local.py if one is importable (safe overrides only)."""
    try:
        import config_local as _config_local  # type: ignore
    except ImportError:
        return settings

    if hasattr(_config_local, "CONSOLE_ENABLED"):
        object.__setattr__(settings, "console_enabled", bool(_config_local.CONSOLE_ENABLED))
    if hasattr(_config_local, "LOG_LEVEL"):
        object.__setattr__(settings, "log_level", str(_config_local.LOG_LEVEL).upper())
    logger.debug("Applied config_local overrides.")
    return settings


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = _apply_local_overrides(Settings.from_env())
    return _SETTINGS


def reset_settings_cache() -> None:
    global _SETTINGS
    _SETTINGS = None
