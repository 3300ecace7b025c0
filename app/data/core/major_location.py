from enum import Enum
from app.data.core.user_created_base import UserCreatedBase
from app import db


class LocationType(str, Enum):
    WAREHOUSE = 'WAREHOUSE'
    STORE = 'STORE'


class RevenueTier(str, Enum):
    A = 'A'
    B = 'B'
    C = 'C'


class Location(UserCreatedBase):
    """Warehouse or store in the location directory"""
    __tablename__ = 'locations'

    code = db.Column(db.String(40), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    location_type = db.Column(db.String(20), nullable=False, default=LocationType.STORE.value)
    revenue_tier = db.Column(db.String(1), nullable=False, default=RevenueTier.B.value)
    is_active = db.Column(db.Boolean, default=True)

    @property
    def is_warehouse(self):
        return self.location_type == LocationType.WAREHOUSE.value

    @property
    def is_store(self):
        return self.location_type == LocationType.STORE.value

    def __repr__(self):
        return f'<Location {self.code}>'
