import calendar
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Tuple


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form shift timestamps are stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    """Normalize an incoming datetime: aware values are converted to UTC, naive ones are assumed UTC."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Half-open [start, next day start) datetime window for a calendar day"""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time(23, 59, 59))


def iter_days(start_date: date, end_date: date) -> Iterator[date]:
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def month_bounds(month: str) -> Tuple[date, date]:
    """First and last day for a ``YYYY-MM`` string"""
    try:
        year, month_number = (int(part) for part in month.split("-")[:2])
        _, num_days = calendar.monthrange(year, month_number)
    except (ValueError, calendar.IllegalMonthError):
        raise ValueError(f"Invalid month '{month}', expected YYYY-MM")
    return date(year, month_number, 1), date(year, month_number, num_days)
