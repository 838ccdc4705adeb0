"""
Day-granularity helpers

All comparisons use local calendar days. Datetimes are naive local time,
the same values `datetime.now()` returns.
"""
from datetime import datetime, timedelta


def to_local(value: datetime) -> datetime:
    """Convert an aware timestamp to naive local time; naive values pass through"""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def start_of_day(value: datetime) -> datetime:
    """Truncate a timestamp to local midnight"""
    return to_local(value).replace(hour=0, minute=0, second=0, microsecond=0)


def is_same_day(first: datetime, second: datetime) -> bool:
    """Two timestamps fall on the same local calendar date"""
    return to_local(first).date() == to_local(second).date()


def add_days(value: datetime, days: int) -> datetime:
    return value + timedelta(days=days)
