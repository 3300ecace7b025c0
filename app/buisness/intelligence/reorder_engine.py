"""
Reorder Check Engine

Compares on-hand stock with a reorder point derived from demand, supplier lead
time and safety stock, and opens deduplicated LOW_STOCK alerts. Alerts are
never resolved here.
"""

from dataclasses import dataclass
from typing import List

from sqlalchemy.orm import joinedload

from app.buisness.intelligence.demand_signals import DemandSignals
from app.buisness.intelligence.managers import AlertManager
from app.data.core.major_location import Location
from app.data.core.supply.product import Product, ProductVariant
from app.data.inventory.base import AlertSeverity, AlertType, InventoryLevel
from app.logger import get_logger

logger = get_logger("inventory_intelligence.domain.intelligence.reorder")


@dataclass(frozen=True)
class ReplenishmentPolicy:
    avg_daily_demand: float
    lead_time_days: float
    safety_stock_days: float

    @property
    def reorder_point(self) -> float:
        return self.avg_daily_demand * (self.lead_time_days + self.safety_stock_days)

    def needs_reorder(self, quantity_on_hand: float) -> bool:
        return quantity_on_hand <= self.reorder_point


@dataclass(frozen=True)
class StockSnapshot:
    product_variant_id: int
    location_id: int
    variant_sku: str
    location_code: str
    quantity_on_hand: float
    lead_time_days: float

    @property
    def pair(self):
        return (self.product_variant_id, self.location_id)


class ReorderCheckEngine:

    def __init__(self, context):
        self.context = context
        self.signals = DemandSignals(context)
        self.alerts = AlertManager(context)

    def check(self) -> dict:
        """
        Evaluate every stocked pair against its reorder point.

        Returns:
            dict: {checked, alerts_created, already_open, errors}
        """
        snapshots = self.stock_snapshots()
        demand = self.signals.weekly_demand(s.pair for s in snapshots)
        safety_days = self.context.policy.safety_stock_days

        summary = {'checked': 0, 'alerts_created': 0, 'already_open': 0, 'errors': []}
        for snapshot in snapshots:
            try:
                policy = ReplenishmentPolicy(demand[snapshot.pair].daily_qty, snapshot.lead_time_days, safety_days)
                summary['checked'] += 1
                if not policy.needs_reorder(snapshot.quantity_on_hand):
                    continue
                severity = AlertSeverity.CRITICAL if snapshot.quantity_on_hand <= 0 else AlertSeverity.WARNING
                message = (
                    f"{snapshot.variant_sku} at {snapshot.location_code}: on hand "
                    f"{snapshot.quantity_on_hand:g} is at or below reorder point {policy.reorder_point:.2f}"
                )
                created = self.alerts.open_alert_if_absent(
                    snapshot.location_id, snapshot.product_variant_id,
                    AlertType.LOW_STOCK.value, severity.value, message,
                )
                if created:
                    summary['alerts_created'] += 1
                else:
                    summary['already_open'] += 1
            except Exception as e:
                self.context.session.rollback()
                logger.error(f"Reorder check failed for variant {snapshot.product_variant_id} "
                             f"at location {snapshot.location_id}: {e}")
                summary['errors'].append({
                    'product_variant_id': snapshot.product_variant_id,
                    'location_id': snapshot.location_id,
                    'error': str(e),
                })

        logger.info(
            f"Reorder check: {summary['checked']} checked, {summary['alerts_created']} alerts created, "
            f"{summary['already_open']} already open, {len(summary['errors'])} errors"
        )
        return summary

    def stock_snapshots(self) -> List[StockSnapshot]:
        """Plain copies of the stock rows so per-row rollbacks cannot expire them"""
        levels = self.context.session.query(InventoryLevel).join(
            Location, Location.id == InventoryLevel.location_id
        ).join(
            ProductVariant, ProductVariant.id == InventoryLevel.product_variant_id
        ).filter(
            Location.is_active.is_(True),
            ProductVariant.is_active.is_(True),
        ).options(
            joinedload(InventoryLevel.location),
            joinedload(InventoryLevel.product_variant).joinedload(ProductVariant.product).joinedload(Product.supplier),
        ).order_by(InventoryLevel.location_id, InventoryLevel.product_variant_id).all()

        return [
            StockSnapshot(
                product_variant_id=level.product_variant_id,
                location_id=level.location_id,
                variant_sku=level.product_variant.sku,
                location_code=level.location.code,
                quantity_on_hand=level.quantity_on_hand,
                lead_time_days=level.product_variant.lead_time_days,
            )
            for level in levels
        ]
