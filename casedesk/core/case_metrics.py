"""
Derived figures shown on dashboards and detail views.

Pure functions over plain values so they can be used from models,
services and the client library alike.
"""

import re
from datetime import date, datetime

OPEN_CASE_PROGRESS_CAP = 95
MIN_DEADLINE_URGENCY = 30

# Base progress by case status; closed work is done by definition.
STATUS_BASE_PROGRESS = {
    "Active": 40,
    "On Hold": 30,
    "Closed": 100,
    "Archived": 100,
}

# (age upper bound in days, bonus) checked in order
AGE_BUCKETS = [
    (30, 0),
    (90, 15),
    (180, 25),
]
OLDEST_BUCKET_BONUS = 35

_WHITESPACE = re.compile(r"\s+")


def _value(member) -> str:
    return getattr(member, "value", member)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def days_left(deadline: date | datetime | None, today: date | None = None) -> int | None:
    """Whole days until ``deadline``; negative once it has passed."""
    if deadline is None:
        return None
    today = today or date.today()
    return (_as_date(deadline) - today).days


def deadline_urgency(days: int | None) -> int | None:
    """
    Urgency bar percentage for a deadline ``days`` away.

    Each remaining day removes three points, never dropping below 30.
    Overdue deadlines are pinned at 100.
    """
    if days is None:
        return None
    if days < 0:
        return 100
    return max(100 - days * 3, MIN_DEADLINE_URGENCY)


def case_progress(
    status: str,
    date_opened: date | datetime | None,
    today: date | None = None,
) -> int:
    """
    Heuristic completion percentage for a case.

    Closed and archived cases are always 100. Open cases start from a
    status base and gain a bonus as they age, capped below 100.
    """
    base = STATUS_BASE_PROGRESS.get(_value(status), 40)
    if base >= 100:
        return 100
    if date_opened is None:
        return base

    today = today or date.today()
    age = max((today - _as_date(date_opened)).days, 0)

    bonus = OLDEST_BUCKET_BONUS
    for upper_bound, bucket_bonus in AGE_BUCKETS:
        if age < upper_bound:
            bonus = bucket_bonus
            break

    return min(base + bonus, OPEN_CASE_PROGRESS_CAP)


def word_count(content: str | None) -> int:
    if not content or not content.strip():
        return 0
    return len(_WHITESPACE.split(content.strip()))


def character_count(content: str | None) -> int:
    return len(content or "")


def format_file_size(size_bytes: int | None) -> str:
    """Human readable size: ``0 B``, ``512 B``, ``1.5 KB``, ``25.0 MB``."""
    if not size_bytes:
        return "0 B"
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            if unit == "B":
                return f"{int(size)} B"
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


def is_invoice_overdue(status: str, due_date: date | None, today: date | None = None) -> bool:
    """Unpaid invoices past their due date, or explicitly marked overdue."""
    if _value(status) == "overdue":
        return True
    if _value(status) != "pending" or due_date is None:
        return False
    return _as_date(due_date) < (today or date.today())
