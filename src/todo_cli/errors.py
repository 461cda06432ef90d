# src/todo_cli/errors.py

"""Error hierarchy shared by the store, the storage layer and the CLI."""

from __future__ import annotations

from pathlib import Path


class TodoError(Exception):
    """Base class for every error the CLI reports to the user."""


class ValidationError(TodoError):
    """Bad user input: empty description, malformed date, unknown priority."""


class NotFoundError(TodoError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task #{task_id} not found")
        self.task_id = task_id


class AlreadyCompletedError(TodoError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task #{task_id} is already completed")
        self.task_id = task_id


class PersistenceError(TodoError):
    """The task file could not be read, written or parsed."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)
        self.path = Path(path) if path is not None else None
