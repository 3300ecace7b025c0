"""
Demand Forecasting Engine

Forecasts next-week demand for every stocked (variant, location) pair and
upserts one DemandForecast row per week in the forecast horizon. Reruns over
the same data produce the same rows.
"""

from typing import List, Optional, Tuple

from app.buisness.core.errors import NotFoundError
from app.buisness.core.week_calendar import forecast_weeks
from app.buisness.intelligence.demand_aggregator import DemandAggregator
from app.buisness.intelligence.forecast_strategies import ForecastStrategy
from app.buisness.intelligence.managers import ForecastManager
from app.data.core.major_location import Location
from app.data.core.supply.product import ProductVariant
from app.data.inventory.base import DemandForecast, ForecastMethod, InventoryLevel
from app.logger import get_logger

logger = get_logger("inventory_intelligence.domain.intelligence.forecasting")


class DemandForecastingEngine:

    def __init__(self, context):
        self.context = context
        self.aggregator = DemandAggregator(context)
        self.forecasts = ForecastManager(context)

    def forecast(self, location_id: Optional[int] = None, method: Optional[str] = None,
                 window=None, alpha=None, strategy: Optional[ForecastStrategy] = None) -> dict:
        """
        Forecast and upsert demand for every target pair.

        Args:
            location_id: Only forecast pairs at this location
            method: Strategy name (auto, moving-average, exponential-smoothing, naive)
            window: Moving average window override
            alpha: Smoothing factor override
            strategy: Already parsed strategy; takes precedence over method/window/alpha

        Returns:
            dict: {upserted, skipped_manual, method, errors}

        Raises:
            ValidationError: Unknown strategy or bad parameters
            NotFoundError: Unknown location
        """
        if strategy is None:
            strategy = ForecastStrategy.parse(method, window, alpha, self.context.policy)
        if location_id is not None and self.context.session.get(Location, location_id) is None:
            raise NotFoundError(f"Location {location_id} not found")

        weeks = forecast_weeks(self.context.now(), self.context.policy.forecast_horizon_weeks)
        targets = self.target_pairs(location_id)
        manual = self.manual_overrides(targets, weeks)
        series_by_pair = self.aggregator.weekly_series(pairs=targets, location_id=location_id)

        summary = {'upserted': 0, 'skipped_manual': 0, 'method': strategy.describe(), 'errors': []}
        for variant_id, location in targets:
            try:
                outcome = strategy.run(series_by_pair[(variant_id, location)].observed)
                for week in weeks:
                    if (variant_id, location, week) in manual:
                        summary['skipped_manual'] += 1
                        continue
                    if self.forecasts.upsert_forecast(variant_id, location, week, outcome):
                        summary['upserted'] += 1
                    else:
                        summary['skipped_manual'] += 1
            except Exception as e:
                self.context.session.rollback()
                logger.error(f"Forecast failed for variant {variant_id} at location {location}: {e}")
                summary['errors'].append({
                    'product_variant_id': variant_id,
                    'location_id': location,
                    'error': str(e),
                })

        logger.info(
            f"Forecast run ({summary['method']}): {summary['upserted']} upserted, "
            f"{summary['skipped_manual']} manual kept, {len(summary['errors'])} errors"
        )
        return summary

    def target_pairs(self, location_id: Optional[int] = None) -> List[Tuple[int, int]]:
        """Stocked (variant_id, location_id) pairs at active locations for active variants"""
        query = self.context.session.query(
            InventoryLevel.product_variant_id, InventoryLevel.location_id
        ).join(
            Location, Location.id == InventoryLevel.location_id
        ).join(
            ProductVariant, ProductVariant.id == InventoryLevel.product_variant_id
        ).filter(
            Location.is_active.is_(True),
            ProductVariant.is_active.is_(True),
        )
        if location_id is not None:
            query = query.filter(InventoryLevel.location_id == location_id)
        rows = query.order_by(InventoryLevel.location_id, InventoryLevel.product_variant_id).all()
        return [(variant_id, loc_id) for variant_id, loc_id in rows]

    def manual_overrides(self, pairs, weeks):
        """(variant_id, location_id, week_start) keys already holding MANUAL rows"""
        if not pairs:
            return set()
        rows = self.context.session.query(
            DemandForecast.product_variant_id,
            DemandForecast.location_id,
            DemandForecast.week_start,
        ).filter(
            DemandForecast.method == ForecastMethod.MANUAL.value,
            DemandForecast.week_start.in_(weeks),
        ).all()
        wanted = set(pairs)
        return {(v, l, w) for v, l, w in rows if (v, l) in wanted}
