"""Recurrence expansion for weekly course schedules."""

from collections.abc import Collection, Iterator
from datetime import date, timedelta

MAX_SCAN_DAYS = 365


def to_weekday_index(day: date) -> int:
    """Return the weekday index with 0=Sunday through 6=Saturday."""
    return (day.weekday() + 1) % 7


def expand_dates(
    start_date: date,
    days_of_week: Collection[int],
    *,
    max_count: int | None = None,
    end_date: date | None = None,
    max_scan_days: int = MAX_SCAN_DAYS,
) -> Iterator[date]:
    """Yield dates from ``start_date`` whose weekday is in ``days_of_week``.

    Scanning stops once ``max_count`` dates were yielded, once the scan passes
    ``end_date`` (inclusive), or after ``max_scan_days`` calendar days,
    whichever comes first. A falsy ``max_count`` means no count cap.
    """
    current = start_date
    found = 0
    for _ in range(max_scan_days):
        if max_count and found >= max_count:
            return
        if end_date is not None and current > end_date:
            return
        if to_weekday_index(current) in days_of_week:
            yield current
            found += 1
        current += timedelta(days=1)


def next_matching_date(
    after: date, days_of_week: Collection[int], max_scan_days: int
) -> date | None:
    """Return the first date after ``after`` on one of ``days_of_week``."""
    candidates = expand_dates(
        after + timedelta(days=1),
        days_of_week,
        max_count=1,
        max_scan_days=max_scan_days,
    )
    return next(candidates, None)
