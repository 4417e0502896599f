"""Next-occurrence computation for repeating tasks.

Only the calendar math lives here; nothing schedules or materializes the
next task instance.
"""

import calendar
from datetime import date, datetime, timedelta

from .models import Recurrence


def _add_months(value: date, months: int) -> date:
    """Shift `value` by whole months, clamping the day to the target month's end."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(value.day, last_day))


def calculate_next_recurrence(recurrence: Recurrence | str | None, due_date: date | datetime | None) -> date | None:
    """Return the due date following `due_date` for the given recurrence, or None.

    DAILY/WEEKLY add 1/7 days. MONTHLY/YEARLY keep the day of month and clamp
    it when the target month is shorter (Jan 31 -> Feb 28/29, Feb 29 -> Feb 28).
    NONE and unknown values yield None.
    """
    if due_date is None or recurrence is None:
        return None
    if isinstance(due_date, datetime):
        due_date = due_date.date()

    try:
        kind = Recurrence(recurrence)
    except ValueError:
        return None

    if kind is Recurrence.DAILY:
        return due_date + timedelta(days=1)
    if kind is Recurrence.WEEKLY:
        return due_date + timedelta(weeks=1)
    if kind is Recurrence.MONTHLY:
        return _add_months(due_date, 1)
    if kind is Recurrence.YEARLY:
        return _add_months(due_date, 12)
    return None
