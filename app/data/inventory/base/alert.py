from enum import Enum
from app import db
from app.data.core.user_created_base import UserCreatedBase


class AlertType(str, Enum):
    LOW_STOCK = 'LOW_STOCK'
    STOCKOUT = 'STOCKOUT'
    OVERSTOCK = 'OVERSTOCK'
    REORDER_TRIGGERED = 'REORDER_TRIGGERED'


class AlertSeverity(str, Enum):
    INFO = 'INFO'
    WARNING = 'WARNING'
    CRITICAL = 'CRITICAL'


class Alert(UserCreatedBase):
    """Replenishment alert; resolved manually, never by the engines"""
    __tablename__ = 'alerts'

    type = db.Column(db.String(32), nullable=False)
    severity = db.Column(db.String(16), nullable=False, default=AlertSeverity.WARNING.value)
    product_variant_id = db.Column(db.Integer, db.ForeignKey('product_variants.id'), nullable=True)
    location_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=True)
    message = db.Column(db.Text, nullable=False)
    is_resolved = db.Column(db.Boolean, nullable=False, default=False)
    resolved_at = db.Column(db.DateTime, nullable=True)
    resolved_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # At most one open alert per location/variant/type
    __table_args__ = (
        db.Index(
            'uix_alert_open_location_variant_type',
            'location_id', 'product_variant_id', 'type',
            unique=True,
            sqlite_where=db.text('is_resolved = 0'),
            postgresql_where=db.text('NOT is_resolved'),
        ),
    )

    product_variant = db.relationship('ProductVariant')
    location = db.relationship('Location')
    resolved_by = db.relationship('User', foreign_keys=[resolved_by_id])

    def __repr__(self):
        state = 'resolved' if self.is_resolved else 'open'
        return f'<Alert {self.type} Location:{self.location_id} Variant:{self.product_variant_id} {state}>'
