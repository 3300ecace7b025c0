"""
Intelligence Services
Read-only views over forecasts, sales history and alerts for the intelligence routes.
"""

from .forecast_history_service import ForecastHistoryService
from .alert_service import AlertService

__all__ = [
    'ForecastHistoryService',
    'AlertService',
]
