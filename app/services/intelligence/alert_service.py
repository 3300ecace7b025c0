"""
Alert Service
Presentation service for listing replenishment alerts.
"""

from typing import List, Optional

from app.data.inventory.base import Alert


class AlertService:

    @staticmethod
    def get_open_alerts(location_id: Optional[int] = None, alert_type: Optional[str] = None) -> List[Alert]:
        query = Alert.query.filter(Alert.is_resolved.is_(False))
        if location_id is not None:
            query = query.filter(Alert.location_id == location_id)
        if alert_type:
            query = query.filter(Alert.type == alert_type.upper())
        return query.order_by(Alert.created_at.desc(), Alert.id.desc()).all()
