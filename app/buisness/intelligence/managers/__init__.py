from app.buisness.intelligence.managers.forecast_manager import ForecastManager
from app.buisness.intelligence.managers.alert_manager import AlertManager

__all__ = ['ForecastManager', 'AlertManager']
