"""
Calendar helpers shared by the statement and report projections.

Date windows are inclusive on both ends: a window ending on a given day
covers that whole day, up to 23:59:59.999.

All timestamps are naive wall-clock times in the book's zone. An aware
datetime coming from a clock or a caller keeps its wall time and drops
its tzinfo, so entries and window bounds always compare.
"""

from datetime import date, datetime, time
from typing import Optional, Union

from ledger_engine.models.ledger import wall_clock


END_OF_DAY = time(23, 59, 59, 999000)

DateLike = Union[date, datetime]


def day_start(value: DateLike) -> datetime:
    """Midnight of the value's calendar day (a datetime is truncated)."""
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, time.min)


def day_end(value: DateLike) -> datetime:
    """Last instant (23:59:59.999) of the value's calendar day."""
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, END_OF_DAY)


def window_start(start: DateLike) -> datetime:
    """A datetime start is kept as given; a plain date starts at midnight."""
    return wall_clock(start) if isinstance(start, datetime) else day_start(start)


def period_bounds(start: DateLike, end: DateLike) -> tuple[datetime, datetime]:
    """
    Normalize a user-chosen window.

    The end is always pushed to the last instant of its day.
    """
    return window_start(start), day_end(end)


def in_window(
    timestamp: datetime,
    start: Optional[datetime],
    end: Optional[datetime],
) -> bool:
    if start is not None and timestamp < start:
        return False
    if end is not None and timestamp > end:
        return False
    return True


def resolve_entry_timestamp(entry_date: date, now: datetime) -> datetime:
    """
    Turn the date chosen on the entry form into the entry's timestamp.

    An entry dated today takes the current clock time so that same-day
    entries keep the order in which they were recorded. Any other date
    gets midnight of that day.
    """
    if entry_date == now.date():
        return wall_clock(now).replace(microsecond=0)
    return day_start(entry_date)
