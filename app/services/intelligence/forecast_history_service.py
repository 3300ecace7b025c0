"""
Forecast History Service
Presentation service combining weekly sales history with stored forecasts
for one variant at one location.
"""

from typing import Any, Dict, List, Optional

from app import db
from app.buisness.core.engine_context import EngineContext
from app.buisness.core.errors import NotFoundError, ValidationError
from app.buisness.intelligence.demand_aggregator import DemandAggregator
from app.data.core.major_location import Location
from app.data.core.supply.product import ProductVariant
from app.data.inventory.base import DemandForecast


class ForecastHistoryService:
    """
    Service for forecast history views.

    Provides methods for:
    - Weekly sales history (zero-filled)
    - Stored forecast rows, newest first
    """

    @staticmethod
    def get_forecasts(variant_id: int, location_id: int, limit: int = 12) -> List[DemandForecast]:
        return DemandForecast.query.filter_by(
            product_variant_id=variant_id,
            location_id=location_id,
        ).order_by(DemandForecast.week_start.desc()).limit(limit).all()

    @staticmethod
    def get_history_data(app, variant_id: int, location_id: int,
                         weeks: Optional[int] = None) -> Dict[str, Any]:
        """
        Get sales history and forecasts for a variant at a location.

        Args:
            app: Flask app (for policy settings)
            variant_id: Product variant ID
            location_id: Location ID
            weeks: History window in complete weeks (default: policy history_weeks)

        Raises:
            ValidationError: weeks is less than 1
            NotFoundError: Unknown variant or location
        """
        if weeks is not None and weeks < 1:
            raise ValidationError(f"weeks must be at least 1, got {weeks}")
        if db.session.get(ProductVariant, variant_id) is None:
            raise NotFoundError(f"Product variant {variant_id} not found")
        if db.session.get(Location, location_id) is None:
            raise NotFoundError(f"Location {location_id} not found")

        context = EngineContext.from_app(app)
        series = DemandAggregator(context).series_for(variant_id, location_id, weeks=weeks)
        forecasts = ForecastHistoryService.get_forecasts(variant_id, location_id)

        data = series.to_dict()
        data['history_weeks'] = series.history_weeks
        data['forecasts'] = [f.to_dict(include_audit_fields=False) for f in forecasts]
        data['latest_forecast'] = data['forecasts'][0] if data['forecasts'] else None
        return data
