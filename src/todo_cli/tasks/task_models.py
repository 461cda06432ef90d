# src/todo_cli/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum

from ..errors import ValidationError

DATE_FORMAT = "%Y-%m-%d"


class Priority(StrEnum):
    """Optional task priority. Display only; it does not affect ordering."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: str | Priority | None) -> Priority | None:
        if raw is None or isinstance(raw, Priority):
            return raw
        text = raw.strip().lower()
        if not text:
            return None
        try:
            return cls(text)
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValidationError(f"Invalid priority {raw!r}. Use one of: {choices}.") from None


@dataclass(slots=True)
class Task:
    id: int
    description: str
    completed: bool = False
    due_date: date | None = None
    completed_at: datetime | None = None

    priority: Priority | None = None
    tags: list[str] = field(default_factory=list)


def parse_due_date(raw: str | date | None) -> date | None:
    """
    Parse a YYYY-MM-DD string into a date.

    None passes through, date objects are returned unchanged (a datetime is
    truncated to its calendar day).
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    try:
        return datetime.strptime(raw.strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid due date {raw!r}. Use YYYY-MM-DD.") from None


def parse_tags(raw: str | Iterable[str] | None) -> list[str]:
    """Split "a, b,,c" (or an iterable of strings) into ["a", "b", "c"], keeping first occurrences."""
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    out: list[str] = []
    for part in parts:
        tag = str(part).strip()
        if tag and tag not in out:
            out.append(tag)
    return out
