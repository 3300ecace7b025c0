from app.data.core.user_created_base import UserCreatedBase
from app import db


class Supplier(UserCreatedBase):
    """Supplier reference data; default_lead_days drives reorder points"""
    __tablename__ = 'suppliers'

    name = db.Column(db.String(120), nullable=False)
    country = db.Column(db.String(2), nullable=True)
    currency = db.Column(db.String(3), nullable=False, default='EUR')
    default_lead_days = db.Column(db.Integer, nullable=False, default=30)
    is_active = db.Column(db.Boolean, default=True)

    products = db.relationship('Product', back_populates='supplier')

    def __repr__(self):
        return f'<Supplier {self.name} lead={self.default_lead_days}d>'
