"""Business day counting for leave requests."""

from datetime import date, timedelta

from .exceptions import InvalidDateRangeError

# date.weekday(): Monday is 0, Saturday 5, Sunday 6
WEEKEND_DAYS = frozenset({5, 6})


def count_business_days(start: date, end: date) -> int:
    """
    Count weekdays between two dates, both ends inclusive.

    Args:
        start: First day of leave
        end: Last day of leave

    Returns:
        int: Number of days that are not Saturday or Sunday

    Raises:
        InvalidDateRangeError: If end is before start
    """
    if end < start:
        raise InvalidDateRangeError(
            f"End date {end.isoformat()} is before start date {start.isoformat()}"
        )

    days = 0
    current = start
    while current <= end:
        if current.weekday() not in WEEKEND_DAYS:
            days += 1
        current += timedelta(days=1)
    return days
