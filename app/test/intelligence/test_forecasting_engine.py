"""
Tests for the demand forecasting engine
"""

from dataclasses import replace
from datetime import date

import pytest

from app.buisness.core.errors import NotFoundError, ValidationError
from app.buisness.intelligence.forecast_strategies import ForecastOutcome
from app.buisness.intelligence.forecasting_engine import DemandForecastingEngine
from app.buisness.intelligence.managers import ForecastManager
from app.data.core.user_info.user import User
from app.data.inventory.base import DemandForecast, ForecastMethod

NEXT_WEEK = date(2024, 3, 18)


def _rows(db):
    return [
        (f.product_variant_id, f.location_id, f.week_start, f.forecast_qty, f.method,
         f.confidence_low, f.confidence_high)
        for f in db.session.query(DemandForecast).order_by(DemandForecast.id)
    ]


def test_moving_average_forecast_for_next_week(context, make, db):
    variant = make.variant()
    store = make.location('ST-A')
    make.stock(variant, store, on_hand=20)
    make.weekly_sales(variant, store, [10, 12, 9, 11, 10, 13, 12, 10])

    summary = DemandForecastingEngine(context).forecast(method='moving-average', window=4)

    assert summary == {'upserted': 1, 'skipped_manual': 0, 'method': 'moving-average', 'errors': []}
    row = db.session.query(DemandForecast).one()
    assert row.week_start == NEXT_WEEK
    assert row.week_end == date(2024, 3, 24)
    assert row.forecast_qty == 11.25
    assert row.method == 'MOVING_AVERAGE'
    assert row.confidence_low <= row.forecast_qty <= row.confidence_high


def test_rerun_is_idempotent(context, make, db):
    variant = make.variant()
    store_a = make.location('ST-A')
    store_b = make.location('ST-B')
    make.stock(variant, store_a, on_hand=5)
    make.stock(variant, store_b, on_hand=5)
    make.weekly_sales(variant, store_a, [3, 5, 4])
    make.weekly_sales(variant, store_b, [8])

    engine = DemandForecastingEngine(context)
    first = engine.forecast()
    rows_after_first = _rows(db)
    second = engine.forecast()

    assert first['upserted'] == second['upserted'] == 2
    assert _rows(db) == rows_after_first
    assert db.session.query(DemandForecast).count() == 2


def test_manual_override_is_kept(context, make, db):
    variant = make.variant()
    store = make.location('ST-A')
    make.stock(variant, store, on_hand=5)
    make.weekly_sales(variant, store, [3, 5, 4])
    make.forecast(variant, store, NEXT_WEEK, 99.0, method='MANUAL')

    summary = DemandForecastingEngine(context).forecast()

    assert summary['upserted'] == 0
    assert summary['skipped_manual'] == 1
    assert db.session.query(DemandForecast).one().forecast_qty == 99.0


def test_pairs_without_history_forecast_zero(context, make, db):
    variant = make.variant()
    store = make.location('ST-A')
    make.stock(variant, store, on_hand=5)

    DemandForecastingEngine(context).forecast()

    row = db.session.query(DemandForecast).one()
    assert row.forecast_qty == 0.0
    assert row.method == 'NAIVE'


def test_forecast_rows_attributed_to_system_user(context, make, db):
    variant = make.variant()
    store = make.location('ST-A')
    make.stock(variant, store, on_hand=5)

    DemandForecastingEngine(context).forecast()

    system_user = User.query.filter_by(username='system').one()
    assert db.session.query(DemandForecast).one().created_by_id == system_user.id


def test_location_filter_and_inactive_rows(context, make, db):
    variant = make.variant()
    retired = make.variant(is_active=False)
    store_a = make.location('ST-A')
    store_b = make.location('ST-B')
    make.stock(variant, store_a, on_hand=1)
    make.stock(variant, store_b, on_hand=1)
    make.stock(retired, store_a, on_hand=1)

    summary = DemandForecastingEngine(context).forecast(location_id=store_a.id)

    assert summary['upserted'] == 1
    assert [(f.product_variant_id, f.location_id) for f in db.session.query(DemandForecast)] == [
        (variant.id, store_a.id)
    ]


def test_horizon_writes_one_row_per_week(context, make, db):
    context.policy = replace(context.policy, forecast_horizon_weeks=3)
    variant = make.variant()
    store = make.location('ST-A')
    make.stock(variant, store, on_hand=1)
    make.weekly_sales(variant, store, [2, 2])

    summary = DemandForecastingEngine(context).forecast()

    assert summary['upserted'] == 3
    weeks = [f.week_start for f in db.session.query(DemandForecast).order_by(DemandForecast.week_start)]
    assert weeks == [date(2024, 3, 18), date(2024, 3, 25), date(2024, 4, 1)]


def test_invalid_requests_fail_before_writing(context, make, db):
    variant = make.variant()
    store = make.location('ST-A')
    make.stock(variant, store, on_hand=1)
    engine = DemandForecastingEngine(context)

    with pytest.raises(ValidationError):
        engine.forecast(method='arima')
    with pytest.raises(NotFoundError):
        engine.forecast(location_id=9999)
    assert db.session.query(DemandForecast).count() == 0


def test_one_failing_pair_does_not_stop_the_batch(context, make, db, monkeypatch):
    variant = make.variant()
    store_a = make.location('ST-A')
    store_b = make.location('ST-B')
    make.stock(variant, store_a, on_hand=1)
    make.stock(variant, store_b, on_hand=1)

    engine = DemandForecastingEngine(context)
    original = engine.forecasts.upsert_forecast

    def flaky_upsert(variant_id, location_id, week, outcome):
        if location_id == store_a.id:
            raise RuntimeError("disk full")
        return original(variant_id, location_id, week, outcome)

    monkeypatch.setattr(engine.forecasts, 'upsert_forecast', flaky_upsert)
    summary = engine.forecast()

    assert summary['upserted'] == 1
    assert summary['errors'] == [
        {'product_variant_id': variant.id, 'location_id': store_a.id, 'error': 'disk full'}
    ]


def test_losing_an_insert_race_updates_the_winning_row(context, make, db, monkeypatch):
    variant = make.variant()
    store = make.location('ST-A')
    manager = ForecastManager(context)
    original_find = manager.find
    calls = []

    def stale_find(variant_id, location_id, week):
        calls.append(1)
        if len(calls) == 1:
            # Another run inserts the same week between our read and our insert
            make.forecast(variant, store, week, 3.0)
            return None
        return original_find(variant_id, location_id, week)

    monkeypatch.setattr(manager, 'find', stale_find)
    outcome = ForecastOutcome(forecast_qty=8.5, method=ForecastMethod.NAIVE,
                              confidence_low=6.0, confidence_high=11.0)

    assert manager.upsert_forecast(variant.id, store.id, NEXT_WEEK, outcome) is True
    assert len(calls) == 2
    row = db.session.query(DemandForecast).one()
    assert (row.forecast_qty, row.method, row.week_start) == (8.5, 'NAIVE', NEXT_WEEK)
