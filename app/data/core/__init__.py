"""
Core models package for the Inventory Intelligence Engine
Reference data read by the engines: users, suppliers, products, locations
"""

from .user_info.user import User
from .major_location import Location, LocationType, RevenueTier
from .supply.supplier import Supplier
from .supply.product import Product, ProductVariant

__all__ = [
    'User',
    'Location',
    'LocationType',
    'RevenueTier',
    'Supplier',
    'Product',
    'ProductVariant',
]
