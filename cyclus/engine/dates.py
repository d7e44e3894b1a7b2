"""Date and number helpers shared by the engine modules."""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta


def as_date(value: date | datetime) -> date:
    """Drop the time of day.  ``datetime`` subclasses ``date``, so check it first."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if ``end`` is earlier)."""
    return (as_date(end) - as_date(start)).days


def add_days(day: date | datetime, days: int) -> date:
    return as_date(day) + timedelta(days=days)


def day_in_cycle(cycle_start: date | datetime, day: date | datetime) -> int:
    """1-indexed cycle day.  Day 1 is the start date; earlier dates give <= 0."""
    return days_between(cycle_start, day) + 1


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (28.5 -> 29)."""
    return int(math.floor(value + 0.5))
