"""
Tests for weekly demand aggregation
"""

from datetime import date, datetime, timedelta

from app.buisness.intelligence.demand_aggregator import DemandAggregator, WeeklySeries, bucket_sales
from app.data.inventory.base import SaleRecord
from conftest import FIXED_NOW


def test_bucket_sales_sums_per_week_and_ignores_outside_window():
    weeks = [date(2024, 3, 4), date(2024, 3, 11)]
    sales = [
        (1, 2, 3, datetime(2024, 3, 4, 0, 0)),
        (1, 2, 4, datetime(2024, 3, 10, 23, 59)),
        (1, 2, 5, datetime(2024, 3, 11, 9, 0)),
        (1, 2, 9, datetime(2024, 2, 20, 9, 0)),
    ]
    assert bucket_sales(sales, weeks) == {(1, 2): [7.0, 5.0]}


def test_observed_series_trims_leading_zero_weeks():
    series = WeeklySeries(1, 2, tuple(zip(range(5), [0, 0, 3, 0, 4])))
    assert series.observed == [3, 0, 4]
    assert series.history_weeks == 3
    assert WeeklySeries(1, 2, tuple(zip(range(3), [0, 0, 0]))).observed == []


def test_weekly_series_zero_fills_missing_weeks(context, make):
    variant = make.variant()
    store = make.location('ST-A')
    make.weekly_sales(variant, store, [5, 0, 7])

    series = DemandAggregator(context).series_for(variant.id, store.id)

    assert len(series.weeks) == context.policy.history_weeks
    assert series.quantities[-3:] == [5.0, 0.0, 7.0]
    assert sum(series.quantities) == 12.0
    assert series.weeks[-1][0] == date(2024, 3, 4)


def test_current_week_sales_are_excluded(context, make, db):
    variant = make.variant()
    store = make.location('ST-A')
    db.session.add(SaleRecord(product_variant_id=variant.id, location_id=store.id,
                              quantity=50, occurred_at=FIXED_NOW - timedelta(hours=1)))
    db.session.commit()

    series = DemandAggregator(context).series_for(variant.id, store.id)
    assert series.observed == []


def test_unfiltered_series_covers_every_pair_with_sales(context, make):
    variant = make.variant()
    store_a = make.location('ST-A')
    store_b = make.location('ST-B')
    make.weekly_sales(variant, store_a, [1, 2])
    make.weekly_sales(variant, store_b, [3])

    by_pair = DemandAggregator(context).weekly_series()
    assert set(by_pair) == {(variant.id, store_a.id), (variant.id, store_b.id)}

    only_b = DemandAggregator(context).weekly_series(location_id=store_b.id)
    assert set(only_b) == {(variant.id, store_b.id)}


def test_trailing_weekly_average_uses_velocity_window(context, make):
    variant = make.variant()
    store = make.location('ST-A')
    make.weekly_sales(variant, store, [100, 4, 8, 0, 12])

    averages = DemandAggregator(context).trailing_weekly_averages([(variant.id, store.id)])
    assert averages[(variant.id, store.id)] == 6.0
