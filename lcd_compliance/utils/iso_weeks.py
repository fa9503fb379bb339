"""
ISO 8601 week helpers.

Weeks start on Monday and belong to the year that contains their Thursday,
so January 1-3 can fall in the previous year's last week and December
29-31 in the next year's week 1.
"""

import math
from datetime import date, datetime, timedelta

from lcd_compliance.utils.logging import get_logger

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400


def week_identifier(value: date) -> str:
    """
    Return the ISO week label for a date, e.g. ``"2020-W53"``.

    Falls back to a coarse ``year-W(ceil(day/7))`` label instead of raising
    when the ISO calendar cannot be computed.

    Args:
        value: Date or datetime

    Returns:
        Week identifier ``YYYY-Www``
    """
    try:
        iso_year, iso_week, _ = value.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    except (AttributeError, TypeError, ValueError) as e:
        logger.warning(f"ISO week calculation failed for {value!r}, using approximate label: {e}")
        return f"{value.year}-W{math.ceil(value.day / 7):02d}"


def start_of_iso_week(value: date) -> date:
    """Monday of the ISO week containing ``value``."""
    if isinstance(value, datetime):
        value = value.date()
    return value - timedelta(days=value.weekday())


def expected_weeks(start: date, end: date) -> list[str]:
    """
    Enumerate every ISO week between two dates.

    Walks from the Monday of the week containing ``start`` to ``end`` in
    7-day steps.

    Args:
        start: First day of the range
        end: Last day of the range (inclusive)

    Returns:
        Sorted, de-duplicated week identifiers
    """
    if isinstance(end, datetime):
        end = end.date()

    weeks: set[str] = set()
    current = start_of_iso_week(start)
    while current <= end:
        weeks.add(week_identifier(current))
        current += timedelta(days=7)

    return sorted(weeks)


def days_between(start: date, end: date) -> int:
    """
    Whole days from ``start`` to ``end``, rounded up.

    Plain dates count as midnight; a datetime ``end`` with a time of day
    therefore counts the partial day.
    """
    start_dt = _as_datetime(start)
    end_dt = _as_datetime(end)
    if start_dt.tzinfo is not None and end_dt.tzinfo is None:
        start_dt = start_dt.replace(tzinfo=None)
    elif end_dt.tzinfo is not None and start_dt.tzinfo is None:
        end_dt = end_dt.replace(tzinfo=None)
    return math.ceil((end_dt - start_dt).total_seconds() / SECONDS_PER_DAY)


def _as_datetime(value: date) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)
