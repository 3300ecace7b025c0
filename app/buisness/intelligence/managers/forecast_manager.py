from datetime import date

from app.buisness.core.week_calendar import week_end
from app.buisness.intelligence.managers.row_writer import write_row_with_retry
from app.data.inventory.base import DemandForecast


class ForecastManager:
    """Writes DemandForecast rows for one engine run"""

    def __init__(self, context):
        self.context = context

    def find(self, variant_id: int, location_id: int, week: date):
        return self.context.session.query(DemandForecast).filter_by(
            product_variant_id=variant_id,
            location_id=location_id,
            week_start=week,
        ).first()

    def upsert_forecast(self, variant_id: int, location_id: int, week: date, outcome) -> bool:
        """
        Insert or update the forecast for (variant, location, week).

        Rows with method MANUAL are left untouched.

        Returns:
            bool: True if a row was written, False if a manual override was kept
        """
        session = self.context.session
        user_id = self.context.system_user_id
        generated_at = self.context.now()

        def write():
            row = self.find(variant_id, location_id, week)
            if row is not None and row.is_manual:
                return False
            if row is None:
                row = DemandForecast(
                    product_variant_id=variant_id,
                    location_id=location_id,
                    week_start=week,
                    week_end=week_end(week),
                    created_by_id=user_id,
                )
                session.add(row)
            row.forecast_qty = outcome.forecast_qty
            row.method = outcome.method.value
            row.confidence_low = outcome.confidence_low
            row.confidence_high = outcome.confidence_high
            row.generated_at = generated_at
            row.updated_at = generated_at
            row.updated_by_id = user_id
            session.flush()
            return True

        return write_row_with_retry(
            session, write, f"forecast variant={variant_id} location={location_id} week={week}"
        )
