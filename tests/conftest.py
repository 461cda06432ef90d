# tests/conftest.py

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

from todo_cli.config import Settings
from todo_cli.tasks.task_store import TaskStore

TODAY = date(2025, 9, 20)


class FakeClock:
    """Deterministic clock for TaskStore: returns a fixed, manually advanced time."""

    def __init__(self, now: datetime) -> None:
        self.now = now
        self.calls = 0

    def __call__(self) -> datetime:
        self.calls += 1
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def today() -> date:
    return TODAY


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 9, 20, 9, 30, tzinfo=timezone.utc))


@pytest.fixture()
def store(clock: FakeClock) -> TaskStore:
    """Empty in-memory store; nothing here touches the filesystem."""
    return TaskStore(clock=clock)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings pointing at a per-test directory.

    File logging is off so tests don't leave open log files behind.
    """
    return Settings(
        app_name="todo",
        log_level="WARNING",
        log_to_file=False,
        data_dir=tmp_path,
        data_file=tmp_path / "tasks.json",
        log_dir=tmp_path,
    )


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """main() reconfigures the root logger; put pytest's handlers back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
