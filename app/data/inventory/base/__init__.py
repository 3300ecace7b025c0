"""Base inventory models - CRUD only, no business logic"""

from app.data.inventory.base.sale_record import SaleRecord
from app.data.inventory.base.inventory_level import InventoryLevel
from app.data.inventory.base.demand_forecast import DemandForecast, ForecastMethod
from app.data.inventory.base.alert import Alert, AlertType, AlertSeverity

__all__ = [
    'SaleRecord',
    'InventoryLevel',
    'DemandForecast',
    'ForecastMethod',
    'Alert',
    'AlertType',
    'AlertSeverity',
]
