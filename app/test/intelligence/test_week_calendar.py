"""
Tests for the Monday 00:00 UTC week calendar
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from app.buisness.core.errors import ValidationError
from app.buisness.core.week_calendar import (
    forecast_weeks, to_utc_naive, trailing_weeks, week_end, week_start,
)
from app.data.core.major_location import Location


def test_week_starts_on_monday():
    assert week_start(date(2024, 3, 13)) == date(2024, 3, 11)
    assert week_start(date(2024, 3, 11)) == date(2024, 3, 11)
    assert week_start(date(2024, 3, 17)) == date(2024, 3, 11)
    assert week_end(date(2024, 3, 13)) == date(2024, 3, 17)


def test_aware_timestamps_are_bucketed_in_utc():
    # Monday 01:00 in UTC+2 is still Sunday in UTC
    local = datetime(2024, 3, 11, 1, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_utc_naive(local) == datetime(2024, 3, 10, 23, 0)
    assert week_start(local) == date(2024, 3, 4)


def test_trailing_weeks_exclude_current_week():
    weeks = trailing_weeks(datetime(2024, 3, 13, 15, 0), 3)
    assert weeks == [date(2024, 2, 19), date(2024, 2, 26), date(2024, 3, 4)]


def test_trailing_weeks_needs_a_positive_count():
    for count in (0, -2):
        with pytest.raises(ValidationError):
            trailing_weeks(datetime(2024, 3, 13), count)


def test_forecast_weeks_follow_current_week():
    assert forecast_weeks(datetime(2024, 3, 13), 2) == [date(2024, 3, 18), date(2024, 3, 25)]


def test_locations_have_no_local_week_boundary():
    assert 'timezone' not in Location.__table__.columns
