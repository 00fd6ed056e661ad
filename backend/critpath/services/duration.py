"""
Calendar-day helpers for the scheduling engine.

All schedule arithmetic is done on ``datetime.date`` values, so a time of day
never leaks into durations or slack.
"""

from datetime import date, datetime
from typing import Any

DEFAULT_DURATION_DAYS = 1


def to_calendar_date(value: Any) -> date | None:
    """
    Normalize a date-like value to a calendar date (midnight).

    Accepts ``date``, ``datetime`` (time of day is dropped) and ISO-8601
    strings such as ``"2026-03-01"`` or ``"2026-03-01T23:59:59.999Z"``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.split("T", 1)[0].strip())
        except ValueError:
            raise ValueError(f"Invalid date string: {value!r}")
    raise ValueError(f"Invalid date type: {type(value).__name__}")


def resolve_duration(due_date: Any, today: date | None = None) -> int:
    """
    Duration of a task in whole days, derived from its due date.

    - No due date: 1 day.
    - Otherwise the number of days from ``today`` until the due date,
      never less than 1 (past or same-day due dates still take a day).
    """
    due = to_calendar_date(due_date)
    if due is None:
        return DEFAULT_DURATION_DAYS

    today = to_calendar_date(today) or date.today()
    return max(DEFAULT_DURATION_DAYS, (due - today).days)
