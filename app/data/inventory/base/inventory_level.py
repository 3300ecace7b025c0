from app import db
from app.data.core.user_created_base import UserCreatedBase


class InventoryLevel(UserCreatedBase):
    """Current inventory levels by variant and location"""
    __tablename__ = 'inventory_levels'

    # Foreign Keys
    product_variant_id = db.Column(db.Integer, db.ForeignKey('product_variants.id'), nullable=False)
    location_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=False)

    # Quantities
    quantity_on_hand = db.Column(db.Float, nullable=False, default=0.0)
    quantity_reserved = db.Column(db.Float, nullable=False, default=0.0)

    # Unique constraint on variant and location combination
    __table_args__ = (
        db.UniqueConstraint('product_variant_id', 'location_id', name='uix_variant_location'),
    )

    # Relationships
    product_variant = db.relationship('ProductVariant')
    location = db.relationship('Location')

    def __repr__(self):
        return f'<InventoryLevel Variant:{self.product_variant_id} Location:{self.location_id} Qty:{self.quantity_on_hand}>'

    @property
    def quantity_available(self):
        """Quantity available (on hand minus reserved), never negative"""
        return max(0.0, (self.quantity_on_hand or 0.0) - (self.quantity_reserved or 0.0))
