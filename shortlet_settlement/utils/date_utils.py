"""Clock and date-range helpers"""

from datetime import date, datetime, time, timezone
from typing import Callable, Optional, Union

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


def start_of_day(day: Optional[Union[date, datetime]]) -> Optional[datetime]:
    """Inclusive lower bound for a date filter; datetimes pass through unchanged"""
    if day is None or isinstance(day, datetime):
        return day
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: Optional[Union[date, datetime]]) -> Optional[datetime]:
    """Inclusive upper bound for a date filter (last microsecond of the day)"""
    if day is None or isinstance(day, datetime):
        return day
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def as_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC"""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
