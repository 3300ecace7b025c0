"""
Week calendar

Weeks start on Monday 00:00 UTC. Timezone-aware timestamps are converted to
UTC; naive timestamps are taken to already be UTC. Persisted datetimes are
naive UTC.
"""

from datetime import date, datetime, timedelta, timezone
from typing import List

from app.buisness.core.errors import ValidationError

WEEK = timedelta(days=7)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def week_start(value) -> date:
    """Monday of the UTC week containing value (date or datetime)"""
    if isinstance(value, datetime):
        value = to_utc_naive(value).date()
    return value - timedelta(days=value.weekday())


def week_end(value) -> date:
    """Sunday closing the week that contains value"""
    return week_start(value) + timedelta(days=6)


def week_start_datetime(value) -> datetime:
    start = week_start(value)
    return datetime(start.year, start.month, start.day)


def trailing_weeks(now: datetime, count: int) -> List[date]:
    """
    The last `count` complete weeks before the week containing `now`, oldest first.
    """
    if count < 1:
        raise ValidationError(f"Week count must be at least 1, got {count}")
    current = week_start(now)
    return [current - WEEK * offset for offset in range(count, 0, -1)]


def forecast_weeks(now: datetime, horizon: int) -> List[date]:
    """Week starts to forecast: the weeks following the current week"""
    current = week_start(now)
    return [current + WEEK * offset for offset in range(1, horizon + 1)]
