from datetime import date, timedelta
from typing import Iterator


def previous_day(day: date) -> date:
    return day - timedelta(days=1)


def month_start(day: date) -> date:
    return day.replace(day=1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
