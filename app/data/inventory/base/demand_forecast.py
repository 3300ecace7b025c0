from enum import Enum
from app import db
from app.data.core.user_created_base import UserCreatedBase, utcnow


class ForecastMethod(str, Enum):
    """Method recorded on a stored forecast row"""
    MOVING_AVERAGE = 'MOVING_AVERAGE'
    EXPONENTIAL_SMOOTHING = 'EXPONENTIAL_SMOOTHING'
    NAIVE = 'NAIVE'
    MANUAL = 'MANUAL'


class DemandForecast(UserCreatedBase):
    """Forecast weekly demand for one variant at one location"""
    __tablename__ = 'demand_forecasts'

    product_variant_id = db.Column(db.Integer, db.ForeignKey('product_variants.id'), nullable=False)
    location_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=False)
    week_start = db.Column(db.Date, nullable=False)
    week_end = db.Column(db.Date, nullable=False)
    forecast_qty = db.Column(db.Float, nullable=False)
    method = db.Column(db.String(32), nullable=False, default=ForecastMethod.NAIVE.value)
    confidence_low = db.Column(db.Float, nullable=True)
    confidence_high = db.Column(db.Float, nullable=True)
    generated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    # One row per variant/location/week; reruns update in place
    __table_args__ = (
        db.UniqueConstraint('product_variant_id', 'location_id', 'week_start', name='uix_forecast_variant_location_week'),
    )

    product_variant = db.relationship('ProductVariant')
    location = db.relationship('Location')

    @property
    def is_manual(self):
        return self.method == ForecastMethod.MANUAL.value

    def __repr__(self):
        return f'<DemandForecast Variant:{self.product_variant_id} Location:{self.location_id} Week:{self.week_start} Qty:{self.forecast_qty}>'
