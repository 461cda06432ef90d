# src/todo_cli/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- takes the Settings for this invocation,
- loads the TaskStore from the task file,
- samples "today" once so every command sees a single consistent date,
- writes the store back after mutating commands.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from ..config import Settings, get_settings
from ..tasks.storage import load_task_store, save_task_store
from ..tasks.task_store import Clock, TaskStore, now_local

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    settings: Settings
    store: TaskStore
    today: date


def create_initial_state(
    *,
    settings: Settings | None = None,
    today: date | None = None,
    clock: Clock = now_local,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    store = load_task_store(settings.data_file, clock=clock)
    if today is None:
        today = clock().date()
    return AppState(settings=settings, store=store, today=today)


def persist_state(state: AppState) -> None:
    save_task_store(state.settings.data_file, state.store)
