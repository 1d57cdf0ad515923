"""
Bill status rules.

Stored status is one of ``paid``, ``unpaid`` or ``overdue``. The status shown
to the user additionally distinguishes ``due_soon`` and ``upcoming`` and is
recomputed from the due date every time a bill is serialized, so a stale
stored value never reaches the dashboard.

Both the write path (what to persist) and the read path (what to display)
go through ``display_status``.
"""

import re
from datetime import date, datetime
from typing import Optional

import pytz

from app.config import settings


PAID = "paid"
UNPAID = "unpaid"
OVERDUE = "overdue"
DUE_SOON = "due_soon"
UPCOMING = "upcoming"

STORED_STATUSES = (PAID, UNPAID, OVERDUE)

# days ahead (inclusive) that count as "due soon"
DUE_SOON_DAYS = 7

# calendar date, optionally followed by an ISO time part
DUE_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}(T[\d:.]+(Z|[+-]\d{2}:?\d{2})?)?")


def parse_due_date(value: str) -> date:
    """Parse an ISO due date; a trailing time part is ignored."""
    value = value.strip()
    if not DUE_DATE_PATTERN.fullmatch(value):
        raise ValueError(f"Not an ISO date: {value!r}")
    return date.fromisoformat(value[:10])


def local_today() -> date:
    return datetime.now(pytz.timezone(settings.TIMEZONE)).date()


def display_status(stored_status: str, due_date: str, today: Optional[date] = None) -> str:
    if stored_status == PAID:
        return PAID

    today = today or local_today()
    days_until_due = (parse_due_date(due_date) - today).days

    if days_until_due < 0:
        return OVERDUE
    if days_until_due <= DUE_SOON_DAYS:
        return DUE_SOON
    return UPCOMING


def persisted_status(status: str, due_date: str, today: Optional[date] = None) -> str:
    """
    Status to store for a bill.

    ``paid`` is kept as-is. Anything else becomes ``overdue`` when the due date
    is strictly before today and ``unpaid`` otherwise.
    """
    if status == PAID:
        return PAID
    if display_status(status, due_date, today) == OVERDUE:
        return OVERDUE
    return UNPAID
