"""Date manipulation utilities"""

from datetime import datetime, timedelta, timezone

ONE_DAY = timedelta(days=1)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. read back from SQLite) as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def full_days_between(start: datetime, end: datetime) -> int:
    """Whole days elapsed from start to end, zero if end is not after start"""
    elapsed = as_utc(end) - as_utc(start)
    if elapsed <= timedelta(0):
        return 0
    return elapsed // ONE_DAY
