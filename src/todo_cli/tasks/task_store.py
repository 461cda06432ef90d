# src/todo_cli/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date, datetime

from ..errors import AlreadyCompletedError, NotFoundError, TodoError, ValidationError
from .task_models import Priority, Task, parse_due_date, parse_tags
from .urgency import UrgencyCategory, classify

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def now_local() -> datetime:
    return datetime.now().astimezone()


@dataclass(slots=True)
class CompletionReport:
    """Outcome of complete_many: which ids were completed and why the others were not."""

    completed: list[int] = field(default_factory=list)
    # One entry per failed attempt, so repeated ids each get their own error.
    failures: list[tuple[int, TodoError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failed(self) -> list[int]:
        return [task_id for task_id, _ in self.failures]


class TaskStore:
    """
    In-memory, insertion-ordered task collection.

    Ids come from a counter that only moves forward: removing tasks (even all
    of them) never makes an id available again. The store knows nothing about
    files; see storage.py for load/save.
    """

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        *,
        next_id: int | None = None,
        clock: Clock = now_local,
    ) -> None:
        self._tasks: list[Task] = []
        seen: set[int] = set()
        for task in tasks:
            if task.id in seen:
                raise ValueError(f"duplicate task id {task.id}")
            seen.add(task.id)
            self._tasks.append(task)

        floor = max(seen, default=0) + 1
        self._next_id = max(floor, next_id or 1)
        self._clock = clock

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self):
        return iter(list(self._tasks))

    # ---- queries ----

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: int) -> Task:
        for task in self._tasks:
            if task.id == task_id:
                return task
        raise NotFoundError(task_id)

    def search(self, keyword: str) -> list[Task]:
        """Case-insensitive substring match on descriptions, in store order."""
        needle = keyword.casefold()
        return [t for t in self._tasks if needle in t.description.casefold()]

    def list_tasks(
        self, *, urgent_only: bool = False, today: date | None = None
    ) -> list[tuple[Task, UrgencyCategory]]:
        """
        Tasks paired with their urgency category, most pressing first.

        Order: severity (overdue -> due today -> tomorrow -> soon -> unscheduled
        -> completed), then due date ascending with undated tasks last, then
        store order. With urgent_only, completed and unscheduled tasks are dropped.
        """
        if today is None:
            today = self._clock().date()

        rows = [(t, classify(t.due_date, today, t.completed)) for t in self._tasks]
        if urgent_only:
            rows = [(t, cat) for t, cat in rows if cat.is_urgent]

        # sorted() is stable, so ties keep insertion order.
        return sorted(
            rows,
            key=lambda row: (
                row[1].severity,
                row[0].due_date is None,
                row[0].due_date or date.min,
            ),
        )

    # ---- mutations ----

    def add(
        self,
        description: str,
        due_date: str | date | None = None,
        *,
        priority: str | Priority | None = None,
        tags: str | Iterable[str] | None = None,
    ) -> int:
        text = _clean_description(description)
        due = parse_due_date(due_date)
        prio = Priority.parse(priority)
        tag_list = parse_tags(tags)

        task_id = self._next_id
        self._tasks.append(
            Task(id=task_id, description=text, due_date=due, priority=prio, tags=tag_list)
        )
        self._next_id += 1
        logger.debug("Task added id=%s due=%s priority=%s", task_id, due, prio)
        return task_id

    def edit(
        self,
        task_id: int,
        description: str | None = None,
        due_date: str | date | None = None,
    ) -> bool:
        """
        Partial update. Omitted fields keep their value.

        Returns False (and changes nothing) when neither field is given.
        Everything is validated before anything is written.
        """
        task = self.get(task_id)
        if description is None and due_date is None:
            return False

        text = _clean_description(description) if description is not None else None
        due = parse_due_date(due_date)

        if text is not None:
            task.description = text
        if due is not None:
            task.due_date = due
        logger.debug("Task edited id=%s", task_id)
        return True

    def complete(self, task_id: int) -> Task:
        task = self.get(task_id)
        if task.completed:
            raise AlreadyCompletedError(task_id)
        task.completed = True
        task.completed_at = self._clock()
        logger.debug("Task completed id=%s at=%s", task_id, task.completed_at)
        return task

    def complete_many(self, task_ids: Iterable[int]) -> CompletionReport:
        """Complete each id independently; failures are collected, not raised."""
        report = CompletionReport()
        for task_id in task_ids:
            try:
                self.complete(task_id)
            except TodoError as exc:
                report.failures.append((task_id, exc))
            else:
                report.completed.append(task_id)
        if report.failures:
            logger.info(
                "complete_many: %d completed, %d failed", len(report.completed), len(report.failures)
            )
        return report

    def remove(self, task_id: int) -> Task:
        task = self.get(task_id)
        self._tasks.remove(task)
        logger.debug("Task removed id=%s", task_id)
        return task

    def remove_all(self) -> int:
        """Drop every task. The id counter is kept, so new tasks get fresh ids."""
        count = len(self._tasks)
        self._tasks.clear()
        logger.debug("All tasks removed count=%s next_id=%s", count, self._next_id)
        return count


def _clean_description(description: str | None) -> str:
    text = (description or "").strip()
    if not text:
        raise ValidationError("Task description must not be empty.")
    return text
