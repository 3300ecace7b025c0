"""
Forecasting strategies

Pure functions over an observed weekly series (oldest first). A strategy that
cannot run on a series raises ComputationError; run_strategy degrades to the
naive forecast in that case.
"""

from __future__ import annotations

import statistics
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Sequence

from app.buisness.core.errors import ComputationError, ValidationError
from app.data.inventory.base import ForecastMethod

AUTO_MOVING_AVERAGE_MIN_WEEKS = 8
AUTO_SMOOTHING_MIN_WEEKS = 2


class StrategyName(str, Enum):
    AUTO = 'auto'
    MOVING_AVERAGE = 'moving-average'
    EXPONENTIAL_SMOOTHING = 'exponential-smoothing'
    NAIVE = 'naive'

    @classmethod
    def parse(cls, value: Optional[str]) -> 'StrategyName':
        if value is None or value == '':
            return cls.AUTO
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace('_', '-')
        for member in cls:
            if member.value == normalized:
                return member
        raise ValidationError(f"Unknown forecast method: {value!r}")


STORED_METHOD = {
    StrategyName.MOVING_AVERAGE: ForecastMethod.MOVING_AVERAGE,
    StrategyName.EXPONENTIAL_SMOOTHING: ForecastMethod.EXPONENTIAL_SMOOTHING,
    StrategyName.NAIVE: ForecastMethod.NAIVE,
}


def moving_average(values: Sequence[float], window: int) -> float:
    """Mean of the last `window` values"""
    if len(values) < window:
        raise ComputationError(f"Moving average needs {window} weeks, got {len(values)}")
    tail = values[-window:]
    return sum(tail) / window


def exponential_smoothing(values: Sequence[float], alpha: float) -> float:
    """Simple exponential smoothing seeded with the first value"""
    if len(values) < 2:
        raise ComputationError(f"Exponential smoothing needs 2 weeks, got {len(values)}")
    level = values[0]
    for value in values[1:]:
        level = alpha * value + (1 - alpha) * level
    return level


def naive(values: Sequence[float]) -> float:
    """Last observed value, or 0 with no history"""
    return values[-1] if values else 0.0


def round_quantity(value: float) -> float:
    """Round half-up to 2 decimals and floor at zero"""
    rounded = Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    return max(0.0, float(rounded))


def confidence_band(values: Sequence[float], forecast: float) -> tuple[float, float]:
    """Forecast plus/minus the sample standard deviation of the series"""
    spread = statistics.stdev(values) if len(values) >= 2 else 0.0
    return round_quantity(forecast - spread), round_quantity(forecast + spread)


@dataclass(frozen=True)
class ForecastOutcome:
    forecast_qty: float
    method: ForecastMethod
    confidence_low: float
    confidence_high: float
    fell_back: bool = False


@dataclass(frozen=True)
class ForecastStrategy:
    """A validated strategy choice; build with parse() at the boundary"""

    name: StrategyName = StrategyName.AUTO
    window: int = 4
    alpha: float = 0.3

    @classmethod
    def parse(cls, name=None, window=None, alpha=None, policy=None) -> 'ForecastStrategy':
        """
        Validate a strategy request.

        Raises:
            ValidationError: Unknown name, window < 1 or alpha outside (0, 1]
        """
        default_window = policy.moving_average_window if policy else cls.window
        default_alpha = policy.smoothing_alpha if policy else cls.alpha
        try:
            window = int(window) if window not in (None, '') else default_window
            alpha = float(alpha) if alpha not in (None, '') else default_alpha
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid window/alpha: window={window!r} alpha={alpha!r}")
        if window < 1:
            raise ValidationError(f"Moving average window must be at least 1, got {window}")
        if not 0 < alpha <= 1:
            raise ValidationError(f"Smoothing alpha must be in (0, 1], got {alpha}")
        return cls(name=StrategyName.parse(name), window=window, alpha=alpha)

    def resolve(self, history_weeks: int) -> StrategyName:
        """Concrete strategy for a series of this length"""
        if self.name != StrategyName.AUTO:
            return self.name
        if history_weeks >= AUTO_MOVING_AVERAGE_MIN_WEEKS:
            return StrategyName.MOVING_AVERAGE
        if history_weeks >= AUTO_SMOOTHING_MIN_WEEKS:
            return StrategyName.EXPONENTIAL_SMOOTHING
        return StrategyName.NAIVE

    def compute(self, values: Sequence[float], name: StrategyName) -> float:
        if name == StrategyName.MOVING_AVERAGE:
            return moving_average(values, self.window)
        if name == StrategyName.EXPONENTIAL_SMOOTHING:
            return exponential_smoothing(values, self.alpha)
        return naive(values)

    def run(self, values: Sequence[float]) -> ForecastOutcome:
        """Forecast the next week from an observed series"""
        name = self.resolve(len(values))
        fell_back = False
        try:
            raw = self.compute(values, name)
        except ComputationError:
            name, fell_back = StrategyName.NAIVE, True
            raw = naive(values)
        forecast_qty = round_quantity(raw)
        low, high = confidence_band(values, forecast_qty)
        return ForecastOutcome(forecast_qty, STORED_METHOD[name], low, high, fell_back)

    def describe(self) -> str:
        return self.name.value
