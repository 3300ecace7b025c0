"""
Inventory Intelligence data layer

Tables read and written by the intelligence engines:
- SaleRecord: append-only sale events (read-only input)
- InventoryLevel: on-hand snapshot per variant/location (read-only input)
- DemandForecast: weekly forecasts, upserted per (variant, location, week)
- Alert: replenishment alerts, at most one open per (location, variant, type)
"""

from app.data.inventory.base import (
    SaleRecord,
    InventoryLevel,
    DemandForecast,
    ForecastMethod,
    Alert,
    AlertType,
    AlertSeverity,
)

__all__ = [
    'SaleRecord',
    'InventoryLevel',
    'DemandForecast',
    'ForecastMethod',
    'Alert',
    'AlertType',
    'AlertSeverity',
]
