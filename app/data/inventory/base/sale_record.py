from app import db
from app.data.core.user_created_base import UserCreatedBase


class SaleRecord(UserCreatedBase):
    """Single sale event from POS/CSV ingestion; never updated once written"""
    __tablename__ = 'sale_records'

    product_variant_id = db.Column(db.Integer, db.ForeignKey('product_variants.id'), nullable=False)
    location_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=False)
    quantity = db.Column(db.Float, nullable=False)
    unit_cost = db.Column(db.Float, nullable=True)
    occurred_at = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        db.Index('ix_sale_records_variant_location_time', 'product_variant_id', 'location_id', 'occurred_at'),
    )

    product_variant = db.relationship('ProductVariant')
    location = db.relationship('Location')

    def __repr__(self):
        return f'<SaleRecord Variant:{self.product_variant_id} Location:{self.location_id} Qty:{self.quantity}>'
