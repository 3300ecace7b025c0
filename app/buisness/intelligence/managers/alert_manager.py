from app.buisness.intelligence.managers.row_writer import write_row_with_retry
from app.data.inventory.base import Alert
from app.logger import get_logger

logger = get_logger("inventory_intelligence.domain.intelligence.alerts")


class AlertManager:
    """Creates replenishment alerts, at most one open per location/variant/type"""

    def __init__(self, context):
        self.context = context

    def find_open(self, location_id: int, variant_id: int, alert_type: str):
        return self.context.session.query(Alert).filter_by(
            location_id=location_id,
            product_variant_id=variant_id,
            type=alert_type,
            is_resolved=False,
        ).first()

    def open_alert_if_absent(self, location_id: int, variant_id: int, alert_type: str,
                             severity: str, message: str) -> bool:
        """
        Create an open alert unless one already exists.

        A concurrent writer that wins the race trips the partial unique index;
        the retry then finds its row and reports it as already open.

        Returns:
            bool: True if created, False if an open alert already existed
        """
        session = self.context.session
        user_id = self.context.system_user_id

        def write():
            if self.find_open(location_id, variant_id, alert_type) is not None:
                return False
            session.add(Alert(
                type=alert_type,
                severity=severity,
                location_id=location_id,
                product_variant_id=variant_id,
                message=message,
                is_resolved=False,
                created_by_id=user_id,
                updated_by_id=user_id,
            ))
            session.flush()
            return True

        created = write_row_with_retry(
            session, write, f"{alert_type} alert variant={variant_id} location={location_id}"
        )
        if created:
            logger.info(f"Opened {severity} {alert_type} alert for variant {variant_id} at location {location_id}")
        return created
