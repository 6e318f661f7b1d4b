# parking_booking/pricing/calendar.py
from datetime import date, datetime, timedelta
from typing import AbstractSet, Iterator, Tuple

ONE_DAY = timedelta(days=1)


def total_days(start: datetime, end: datetime) -> int:
    """Whole days between start and end; anything under 24h bills as one day."""
    days = (end - start).days
    return days if days >= 1 else 1


def iter_dates(first: date, stop: date) -> Iterator[date]:
    """Half-open [first, stop) range of calendar dates."""
    current = first
    while current < stop:
        yield current
        current += ONE_DAY


def classify(start: datetime, end: datetime, event_dates: AbstractSet[date]) -> Tuple[int, int]:
    """
    Split a booking into (normal_days, event_days).

    The event-day window runs over the calendar dates of start and end and
    ignores the one-day billing floor, so a sub-day booking can report
    zero event days.
    """
    days = total_days(start, end)

    event_days = 0
    if event_dates:
        event_days = sum(1 for d in iter_dates(start.date(), end.date()) if d in event_dates)

    normal_days = max(0, days - event_days)
    return normal_days, event_days
