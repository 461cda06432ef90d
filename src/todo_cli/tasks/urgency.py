# src/todo_cli/tasks/urgency.py

"""
Due-date urgency classification.

Pure functions only: "today" is always passed in by the caller, which samples
it once per command so every task in a listing is judged against the same day.
"""

from __future__ import annotations

from datetime import date, timedelta
from enum import StrEnum

# Tasks due within this many days (and not overdue/today/tomorrow) are "due soon".
SOON_WINDOW_DAYS = 3


class UrgencyCategory(StrEnum):
    COMPLETED = "completed"
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_TOMORROW = "due_tomorrow"
    DUE_SOON = "due_soon"
    NONE_SCHEDULED = "none_scheduled"

    @property
    def severity(self) -> int:
        """Sort rank: lower sorts first in listings."""
        return _SEVERITY[self]

    @property
    def is_urgent(self) -> bool:
        return self in URGENT_CATEGORIES


_SEVERITY: dict[UrgencyCategory, int] = {
    UrgencyCategory.OVERDUE: 0,
    UrgencyCategory.DUE_TODAY: 1,
    UrgencyCategory.DUE_TOMORROW: 2,
    UrgencyCategory.DUE_SOON: 3,
    UrgencyCategory.NONE_SCHEDULED: 4,
    UrgencyCategory.COMPLETED: 5,
}

URGENT_CATEGORIES = frozenset(
    {
        UrgencyCategory.OVERDUE,
        UrgencyCategory.DUE_TODAY,
        UrgencyCategory.DUE_TOMORROW,
        UrgencyCategory.DUE_SOON,
    }
)


def days_until(due_date: date, today: date) -> int:
    """Signed calendar-day distance; negative when overdue."""
    return (due_date - today).days


def classify(due_date: date | None, today: date, completed: bool = False) -> UrgencyCategory:
    """
    Map a due date to an urgency category.

    Rules, first match wins:
    - completed            -> COMPLETED
    - no due date          -> NONE_SCHEDULED
    - before today         -> OVERDUE
    - today                -> DUE_TODAY
    - tomorrow             -> DUE_TOMORROW
    - within 3 days        -> DUE_SOON
    - anything later       -> NONE_SCHEDULED
    """
    if completed:
        return UrgencyCategory.COMPLETED
    if due_date is None:
        return UrgencyCategory.NONE_SCHEDULED
    if due_date < today:
        return UrgencyCategory.OVERDUE
    if due_date == today:
        return UrgencyCategory.DUE_TODAY
    if due_date == today + timedelta(days=1):
        return UrgencyCategory.DUE_TOMORROW
    if due_date <= today + timedelta(days=SOON_WINDOW_DAYS):
        return UrgencyCategory.DUE_SOON
    return UrgencyCategory.NONE_SCHEDULED


def is_urgent(due_date: date | None, today: date, completed: bool = False) -> bool:
    return classify(due_date, today, completed).is_urgent
