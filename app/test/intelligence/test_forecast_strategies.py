"""
Tests for the pure forecasting strategies
"""

import pytest

from app.buisness.core.errors import ComputationError, ValidationError
from app.buisness.intelligence.forecast_strategies import (
    ForecastStrategy, StrategyName, exponential_smoothing, moving_average, naive, round_quantity,
)
from app.config import IntelligencePolicy
from app.data.inventory.base import ForecastMethod

SERIES = [10, 12, 9, 11, 10, 13, 12, 10]


def test_moving_average_of_last_window():
    assert moving_average(SERIES, 4) == 11.25


def test_moving_average_needs_full_window():
    with pytest.raises(ComputationError):
        moving_average([1, 2, 3], 4)


def test_exponential_smoothing_seeded_with_first_value():
    assert exponential_smoothing([10, 20], 0.5) == 15.0
    assert exponential_smoothing([10, 20, 30], 1.0) == 30.0
    with pytest.raises(ComputationError):
        exponential_smoothing([10], 0.3)


def test_naive_uses_last_value_or_zero():
    assert naive([3, 4, 5]) == 5
    assert naive([]) == 0.0


def test_round_quantity_half_up_and_floored():
    assert round_quantity(2.675) == 2.68
    assert round_quantity(1.005) == 1.01
    assert round_quantity(-3.2) == 0.0


def test_auto_picks_strategy_by_history_length():
    strategy = ForecastStrategy.parse()
    assert strategy.name == StrategyName.AUTO
    assert strategy.resolve(8) == StrategyName.MOVING_AVERAGE
    assert strategy.resolve(7) == StrategyName.EXPONENTIAL_SMOOTHING
    assert strategy.resolve(2) == StrategyName.EXPONENTIAL_SMOOTHING
    assert strategy.resolve(1) == StrategyName.NAIVE
    assert strategy.resolve(0) == StrategyName.NAIVE


def test_auto_on_eight_weeks_is_moving_average():
    outcome = ForecastStrategy.parse('auto').run(SERIES)
    assert outcome.forecast_qty == 11.25
    assert outcome.method == ForecastMethod.MOVING_AVERAGE
    assert not outcome.fell_back


def test_short_history_degrades_to_naive():
    outcome = ForecastStrategy.parse('moving-average', window=6).run([4, 9, 7])
    assert outcome.forecast_qty == 7.0
    assert outcome.method == ForecastMethod.NAIVE
    assert outcome.fell_back


def test_confidence_band_is_one_standard_deviation():
    outcome = ForecastStrategy.parse('naive').run([2, 4, 6])
    assert outcome.forecast_qty == 6.0
    assert (outcome.confidence_low, outcome.confidence_high) == (4.0, 8.0)


def test_no_history_forecasts_zero():
    outcome = ForecastStrategy.parse('exponential-smoothing').run([])
    assert outcome.forecast_qty == 0.0
    assert outcome.confidence_low == 0.0


def test_parse_accepts_aliases_and_policy_defaults():
    policy = IntelligencePolicy(moving_average_window=6, smoothing_alpha=0.5)
    strategy = ForecastStrategy.parse('MOVING_AVERAGE', policy=policy)
    assert strategy.name == StrategyName.MOVING_AVERAGE
    assert strategy.window == 6
    assert strategy.alpha == 0.5


@pytest.mark.parametrize('kwargs', [
    {'name': 'holt-winters'},
    {'name': 'naive', 'window': 0},
    {'name': 'naive', 'alpha': 0},
    {'name': 'naive', 'alpha': 1.5},
    {'name': 'naive', 'window': 'four'},
])
def test_parse_rejects_invalid_requests(kwargs):
    with pytest.raises(ValidationError):
        ForecastStrategy.parse(**kwargs)


def test_strategies_are_deterministic():
    strategy = ForecastStrategy.parse('exponential-smoothing', alpha=0.3)
    assert strategy.run(SERIES) == strategy.run(list(SERIES))
