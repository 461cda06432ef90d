# src/todo_cli/tasks/storage.py

"""
JSON persistence for TaskStore.

The whole file is read at startup and rewritten after every mutating command.
Layout:

    {"version": 1, "next_id": 7, "tasks": [{"id": 1, "description": ..., ...}]}

A bare list of task records is also accepted on load (older files); the id
counter is then derived from the highest id.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from datetime import date, datetime
from pathlib import Path
from typing import Any

from ..errors import PersistenceError, TodoError
from .task_models import DATE_FORMAT, Priority, Task
from .task_store import Clock, TaskStore, now_local

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


# ---- record codec ----


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "description": task.description,
        "completed": task.completed,
        "due_date": task.due_date.strftime(DATE_FORMAT) if task.due_date else None,
        "completed_at": task.completed_at.isoformat() if task.completed_at else None,
        "priority": task.priority.value if task.priority else None,
        "tags": list(task.tags),
    }


def record_to_task(raw: Any) -> Task:
    """Decode one record. Raises ValueError describing the first problem found."""
    if not isinstance(raw, dict):
        raise ValueError("task record is not an object")

    task_id = raw.get("id")
    if not isinstance(task_id, int) or isinstance(task_id, bool) or task_id < 1:
        raise ValueError(f"invalid id {task_id!r}")

    description = raw.get("description")
    if not isinstance(description, str) or not description.strip():
        raise ValueError(f"task {task_id}: missing description")

    if "completed" not in raw:
        raise ValueError(f"task {task_id}: missing 'completed'")
    completed = raw["completed"]
    if not isinstance(completed, bool):
        raise ValueError(f"task {task_id}: 'completed' must be a boolean")

    due_date = _optional_date(raw.get("due_date"), task_id)
    completed_at = _optional_timestamp(raw.get("completed_at"), task_id)
    if completed != (completed_at is not None):
        raise ValueError(f"task {task_id}: 'completed_at' must be set exactly when completed")

    priority_raw = raw.get("priority")
    if priority_raw is None:
        priority = None
    elif isinstance(priority_raw, str):
        try:
            priority = Priority(priority_raw)
        except ValueError:
            raise ValueError(f"task {task_id}: unknown priority {priority_raw!r}") from None
    else:
        raise ValueError(f"task {task_id}: 'priority' must be a string")

    tags = raw.get("tags")
    if tags is None:
        tags = []
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise ValueError(f"task {task_id}: 'tags' must be a list of strings")

    return Task(
        id=task_id,
        description=description,
        completed=completed,
        due_date=due_date,
        completed_at=completed_at,
        priority=priority,
        tags=list(tags),
    )


def _optional_date(value: Any, task_id: int) -> date | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"task {task_id}: 'due_date' must be a string")
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f"task {task_id}: bad due_date {value!r}") from None


def _optional_timestamp(value: Any, task_id: int) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"task {task_id}: 'completed_at' must be a string")
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValueError(f"task {task_id}: bad completed_at {value!r}") from None


def store_to_document(store: TaskStore) -> dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "next_id": store.next_id,
        "tasks": [task_to_record(t) for t in store.tasks],
    }


def store_from_document(data: Any, *, clock: Clock = now_local) -> TaskStore:
    """Build a TaskStore from decoded JSON. Raises ValueError on malformed content."""
    next_id: int | None = None
    if isinstance(data, list):
        records = data
    elif isinstance(data, dict):
        records = data.get("tasks", [])
        next_id = data.get("next_id")
        if next_id is not None and (not isinstance(next_id, int) or isinstance(next_id, bool)):
            raise ValueError(f"invalid next_id {next_id!r}")
        if not isinstance(records, list):
            raise ValueError("'tasks' must be a list")
    else:
        raise ValueError("top-level value must be an object or a list")

    tasks = [record_to_task(r) for r in records]
    return TaskStore(tasks, next_id=next_id, clock=clock)


# ---- file I/O ----


def load_task_store(path: str | Path, *, clock: Clock = now_local) -> TaskStore:
    """
    Read the task file. A missing file is an empty store.

    Any other problem (unreadable, not JSON, bad record) raises PersistenceError;
    there is no attempt to salvage part of a corrupt file.
    """
    path = Path(path)
    if not path.exists():
        logger.info("No task file at %s, starting empty", path)
        return TaskStore(clock=clock)

    try:
        text = path.read_text("utf-8")
    except UnicodeDecodeError as exc:
        raise PersistenceError(f"Task file is not valid UTF-8: {exc.reason}", path) from exc
    except OSError as exc:
        raise PersistenceError(f"Could not read task file: {exc.strerror or exc}", path) from exc

    try:
        data = json.loads(text)
        store = store_from_document(data, clock=clock)
    except (ValueError, TodoError) as exc:
        # json.JSONDecodeError is a ValueError too.
        raise PersistenceError(f"Task file is corrupt: {exc}", path) from exc

    logger.info("Loaded %d tasks from %s (next_id=%s)", len(store), path, store.next_id)
    return store


def save_task_store(path: str | Path, store: TaskStore) -> None:
    """Rewrite the whole task file (write to a temp file, then replace)."""
    path = Path(path)
    payload = json.dumps(store_to_document(store), ensure_ascii=False, indent=2)
    tmp = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(payload + "\n", "utf-8")
        os.replace(tmp, path)
    except OSError as exc:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise PersistenceError(f"Could not save tasks: {exc.strerror or exc}", path) from exc

    with contextlib.suppress(OSError):
        # Best-effort: owner-only access.
        os.chmod(path, 0o600)
    logger.info("Saved %d tasks to %s", len(store), path)
