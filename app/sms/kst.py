"""
Korea Standard Time helpers.

The venue operates in a single zone, so a fixed UTC+9 offset is used instead
of a timezone database. Instants handed to the database are naive UTC
datetimes; KST-aware values are only produced for display.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple, Union

KST = timezone(timedelta(hours=9), "KST")

DateLike = Union[str, date]


def utcnow() -> datetime:
    """Current instant as naive UTC"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def kst_now() -> datetime:
    """Current instant as an aware KST datetime"""
    return datetime.now(KST)


def kst_today_string() -> str:
    return kst_now().date().isoformat()


def parse_civil_date(value: DateLike) -> date:
    """Accept a date or a YYYY-MM-DD string; malformed strings raise ValueError"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def kst_to_utc(civil_date: DateLike, clock: str) -> datetime:
    """
    Resolve a KST wall-clock time to a naive UTC instant.

    >>> kst_to_utc("2025-06-11", "10:00")
    datetime.datetime(2025, 6, 11, 1, 0)
    """
    local = datetime.combine(parse_civil_date(civil_date), time.fromisoformat(clock), tzinfo=KST)
    return local.astimezone(timezone.utc).replace(tzinfo=None)


def to_kst(instant: datetime) -> datetime:
    """Naive UTC (or any aware) instant to aware KST"""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(KST)


def format_kst(instant: datetime, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
    """Civil KST string of an instant"""
    return to_kst(instant).strftime(fmt)


def kst_day_bounds(civil_date: DateLike) -> Tuple[datetime, datetime]:
    """Naive UTC [start, end] covering one KST calendar day"""
    day = parse_civil_date(civil_date)
    start = kst_to_utc(day, "00:00")
    return start, start + timedelta(days=1) - timedelta(microseconds=1)


def kst_month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """Naive UTC [start, end] covering one KST calendar month"""
    first = date(year, month, 1)
    next_first = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    start = kst_to_utc(first, "00:00")
    end = kst_to_utc(next_first, "00:00") - timedelta(microseconds=1)
    return start, end
