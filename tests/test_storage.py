# tests/test_storage.py

from __future__ import annotations

import json
import os
import stat
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from todo_cli.errors import PersistenceError
from todo_cli.tasks.storage import (
    load_task_store,
    record_to_task,
    save_task_store,
    task_to_record,
)
from todo_cli.tasks.task_models import Priority
from todo_cli.tasks.task_store import TaskStore


def _snapshot(store: TaskStore) -> list[tuple]:
    return [
        (t.id, t.description, t.completed, t.due_date, t.completed_at, t.priority, t.tags)
        for t in store.tasks
    ]


def test_missing_file_is_an_empty_store(tmp_path: Path) -> None:
    store = load_task_store(tmp_path / "nope.json")
    assert len(store) == 0
    assert store.next_id == 1


def test_save_then_load_reproduces_tasks(tmp_path: Path, store: TaskStore) -> None:
    store.add("Submit report", "2025-09-22", priority="high", tags="work")
    done = store.add("Buy milk")
    store.add("Call mom", date(2025, 10, 1))
    store.complete(done)

    path = tmp_path / "sub" / "tasks.json"
    save_task_store(path, store)
    loaded = load_task_store(path)

    assert _snapshot(loaded) == _snapshot(store)
    assert loaded.next_id == store.next_id


def test_saved_schema(tmp_path: Path, store: TaskStore, clock) -> None:
    task_id = store.add("Submit report", "2025-09-22")
    store.complete(task_id)
    path = tmp_path / "tasks.json"
    save_task_store(path, store)

    data = json.loads(path.read_text("utf-8"))
    assert data["version"] == 1
    assert data["next_id"] == 2
    assert data["tasks"] == [
        {
            "id": 1,
            "description": "Submit report",
            "completed": True,
            "due_date": "2025-09-22",
            "completed_at": clock.now.isoformat(),
            "priority": None,
            "tags": [],
        }
    ]


def test_counter_survives_removing_highest_id(tmp_path: Path, store: TaskStore) -> None:
    store.add("a")
    last = store.add("b")
    store.remove(last)
    path = tmp_path / "tasks.json"
    save_task_store(path, store)

    assert load_task_store(path).add("c") == 3


def test_counter_survives_remove_all(tmp_path: Path, store: TaskStore) -> None:
    store.add("a")
    store.add("b")
    store.remove_all()
    path = tmp_path / "tasks.json"
    save_task_store(path, store)

    loaded = load_task_store(path)
    assert len(loaded) == 0
    assert loaded.add("c") == 3


def test_legacy_list_layout_is_accepted(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(
        json.dumps(
            [
                {"id": 3, "description": "old", "completed": False, "due_date": None, "completed_at": None},
                {
                    "id": 7,
                    "description": "older",
                    "completed": True,
                    "due_date": "2024-01-02",
                    "completed_at": "2024-01-02T10:00:00+01:00",
                },
            ]
        ),
        "utf-8",
    )
    store = load_task_store(path)
    assert [t.id for t in store.tasks] == [3, 7]
    assert store.next_id == 8
    assert store.get(7).completed_at == datetime.fromisoformat("2024-01-02T10:00:00+01:00")
    assert store.get(3).tags == []


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '"just a string"',
        '{"tasks": {}}',
        '{"next_id": "7", "tasks": []}',
        '[{"id": 0, "description": "x", "completed": false}]',
        '[{"id": 1, "description": "", "completed": false}]',
        '[{"id": 1, "description": "x", "completed": "no"}]',
        '[{"id": 1, "description": "x", "completed": false, "due_date": "2025-02-30"}]',
        '[{"id": 1, "description": "x", "completed": true, "completed_at": null}]',
        '[{"id": 1, "description": "x", "completed": false, "completed_at": "2025-01-01T00:00:00"}]',
        '[{"id": 1, "description": "x", "completed": false, "priority": "urgent"}]',
        '[{"id": 1, "description": "a", "completed": false}, {"id": 1, "description": "b", "completed": false}]',
        '[{"id": 1, "description": "x"}]',
        '[{"id": 1, "description": "x", "completed": false, "tags": ""}]',
        '[{"id": 1, "description": "x", "completed": false, "tags": {}}]',
        '[{"id": 1, "description": "x", "completed": false, "tags": 0}]',
    ],
)
def test_malformed_content_is_fatal(tmp_path: Path, content: str) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(content, "utf-8")
    with pytest.raises(PersistenceError) as exc_info:
        load_task_store(path)
    assert exc_info.value.path == path


def test_unreadable_path_is_a_persistence_error(tmp_path: Path) -> None:
    # A directory where the file should be cannot be read as text.
    path = tmp_path / "tasks.json"
    path.mkdir()
    with pytest.raises(PersistenceError):
        load_task_store(path)


def test_non_utf8_file_is_a_persistence_error(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_bytes(b'[{"id": 1, "description": "\xff\xfe", "completed": false}]')
    with pytest.raises(PersistenceError) as exc_info:
        load_task_store(path)
    assert exc_info.value.path == path
    assert "UTF-8" in str(exc_info.value)


def test_unwritable_target_is_a_persistence_error(tmp_path: Path, store: TaskStore) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", "utf-8")
    with pytest.raises(PersistenceError):
        save_task_store(blocker / "tasks.json", store)


@pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
def test_saved_file_is_private(tmp_path: Path, store: TaskStore) -> None:
    store.add("secret")
    path = tmp_path / "tasks.json"
    save_task_store(path, store)
    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert not (tmp_path / "tasks.json.tmp").exists()


def test_record_codec_handles_optional_fields() -> None:
    task = record_to_task(
        {
            "id": 2,
            "description": "x",
            "completed": True,
            "due_date": "2025-09-20",
            "completed_at": "2025-09-20T08:00:00+00:00",
            "priority": "low",
            "tags": ["a"],
        }
    )
    assert task.priority is Priority.LOW
    assert task.completed_at == datetime(2025, 9, 20, 8, tzinfo=timezone.utc)
    assert task_to_record(task)["completed_at"] == "2025-09-20T08:00:00+00:00"
