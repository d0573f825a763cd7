"""Date manipulation utilities"""

import math
from datetime import date, datetime, time, timedelta, timezone

ONE_DAY = timedelta(days=1)


def days_remaining(target_date: date, today: date) -> int:
    """Whole days until a deadline, never less than 1 (overdue goals count as due today)"""
    return max(1, math.ceil((target_date - today) / ONE_DAY))


def to_naive_utc(value: datetime) -> datetime:
    """Normalize aware timestamps to naive UTC so stored and computed times compare"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def start_of_day(value: date) -> datetime:
    """Midnight at the beginning of a calendar date"""
    return datetime.combine(value, time.min)
