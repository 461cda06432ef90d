# src/todo_cli/cli/render.py

"""Plain-text formatting of tasks for the terminal."""

from __future__ import annotations

from datetime import date

from ..tasks.task_models import DATE_FORMAT, Task
from ..tasks.urgency import UrgencyCategory, days_until

DONE_MARK = "✓"


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def urgency_label(task: Task, category: UrgencyCategory, today: date) -> str:
    """Suffix shown after the description, e.g. " OVERDUE by 2 days". Empty when undated."""
    if category is UrgencyCategory.COMPLETED:
        if task.completed_at is not None:
            return f" (done {task.completed_at.strftime(DATE_FORMAT)})"
        return ""
    if task.due_date is None:
        return ""

    days = days_until(task.due_date, today)
    if category is UrgencyCategory.OVERDUE:
        return f" OVERDUE by {_plural(-days, 'day')}"
    if category is UrgencyCategory.DUE_TODAY:
        return " DUE TODAY"
    if category is UrgencyCategory.DUE_TOMORROW:
        return " Due tomorrow"
    if category is UrgencyCategory.DUE_SOON:
        return f" Due in {days} days"
    if days <= 7:
        return f" (due {task.due_date.strftime('%m-%d')})"
    return f" (due {task.due_date.strftime(DATE_FORMAT)})"


def _extras(task: Task) -> str:
    parts = []
    if task.priority is not None:
        parts.append(f"[{task.priority.value}]")
    parts.extend(f"#{tag}" for tag in task.tags)
    return (" " + " ".join(parts)) if parts else ""


def task_line(task: Task, category: UrgencyCategory, today: date) -> str:
    status = DONE_MARK if task.completed else " "
    return f"[{status}] {task.id}: {task.description}{_extras(task)}{urgency_label(task, category, today)}"


def search_line(task: Task) -> str:
    status = DONE_MARK if task.completed else " "
    return f"[{status}] {task.id}: {task.description}{_extras(task)}. Due - {due_text(task)}"


def due_text(task: Task) -> str:
    return task.due_date.strftime(DATE_FORMAT) if task.due_date else "No due date"
