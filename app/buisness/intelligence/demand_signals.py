"""
Demand signals

Weekly demand per (variant, location) taken from the most recent stored
forecast, falling back to trailing sales velocity when no forecast exists.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from app.buisness.core.week_calendar import forecast_weeks
from app.buisness.intelligence.demand_aggregator import DemandAggregator
from app.data.inventory.base import DemandForecast

Pair = Tuple[int, int]

SOURCE_FORECAST = 'forecast'
SOURCE_VELOCITY = 'velocity'
SOURCE_NONE = 'none'


@dataclass(frozen=True)
class WeeklyDemand:
    weekly_qty: float
    source: str

    @property
    def daily_qty(self) -> float:
        return self.weekly_qty / 7


class DemandSignals:

    def __init__(self, context, aggregator: Optional[DemandAggregator] = None):
        self.context = context
        self.aggregator = aggregator or DemandAggregator(context)

    def latest_forecasts(self, pairs: Iterable[Pair] = None, variant_id: int = None) -> Dict[Pair, float]:
        """
        forecast_qty of the latest week_start per pair, up to the next upcoming week.

        Rows further out than next week are ignored when the horizon is longer
        than one week.
        """
        next_week = forecast_weeks(self.context.now(), 1)[0]
        query = self.context.session.query(
            DemandForecast.product_variant_id,
            DemandForecast.location_id,
            DemandForecast.forecast_qty,
        )
        query = query.filter(DemandForecast.week_start <= next_week)
        wanted = set(pairs) if pairs is not None else None
        if wanted is not None:
            if not wanted:
                return {}
            query = query.filter(
                DemandForecast.product_variant_id.in_(sorted({pair[0] for pair in wanted})),
                DemandForecast.location_id.in_(sorted({pair[1] for pair in wanted})),
            )
        if variant_id is not None:
            query = query.filter(DemandForecast.product_variant_id == variant_id)

        latest = {}
        for v_id, l_id, qty in query.order_by(DemandForecast.week_start.desc(), DemandForecast.id.desc()):
            key = (v_id, l_id)
            if key in latest or (wanted is not None and key not in wanted):
                continue
            latest[key] = float(qty)
        return latest

    def weekly_demand(self, pairs: Iterable[Pair]) -> Dict[Pair, WeeklyDemand]:
        pairs = list(dict.fromkeys(pairs))
        forecasts = self.latest_forecasts(pairs)
        missing = [pair for pair in pairs if pair not in forecasts]
        velocities = self.aggregator.trailing_weekly_averages(missing) if missing else {}

        demand = {}
        for pair in pairs:
            if pair in forecasts:
                demand[pair] = WeeklyDemand(forecasts[pair], SOURCE_FORECAST)
            elif velocities.get(pair):
                demand[pair] = WeeklyDemand(velocities[pair], SOURCE_VELOCITY)
            else:
                demand[pair] = WeeklyDemand(0.0, SOURCE_NONE)
        return demand
