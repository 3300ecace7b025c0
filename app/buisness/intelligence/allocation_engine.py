"""
Allocation Proposal Engine

Scores active stores by need for one product variant and proposes an integer
split of the warehouse's available stock. Read-only: nothing is persisted.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional

from app.buisness.core.errors import NotFoundError
from app.buisness.intelligence.allocation import (
    ShareRequest, deficiency, largest_remainder, proportional_shares, rank_key,
)
from app.buisness.intelligence.demand_signals import DemandSignals
from app.data.core.major_location import Location, LocationType
from app.data.core.supply.product import ProductVariant
from app.data.inventory.base import InventoryLevel
from app.logger import get_logger

logger = get_logger("inventory_intelligence.domain.intelligence.allocation")


@dataclass
class AllocationLine:
    location_id: int
    location_code: str
    revenue_tier: str
    on_hand: float
    weekly_demand: float
    demand_source: str
    target_stock: float
    deficiency: int
    score: float
    suggested_qty: int = 0

    def to_dict(self):
        return {
            'location_id': self.location_id,
            'location_code': self.location_code,
            'revenue_tier': self.revenue_tier,
            'on_hand': self.on_hand,
            'weekly_demand': self.weekly_demand,
            'demand_source': self.demand_source,
            'target_stock': round(self.target_stock, 2),
            'deficiency': self.deficiency,
            'score': round(self.score, 4),
            'suggested_qty': self.suggested_qty,
        }


@dataclass
class AllocationProposal:
    product_variant_id: int
    warehouse_id: int
    warehouse_available: int
    lines: List[AllocationLine] = field(default_factory=list)

    @property
    def total_requested(self) -> int:
        return sum(line.deficiency for line in self.lines)

    @property
    def total_suggested(self) -> int:
        return sum(line.suggested_qty for line in self.lines)

    @property
    def fully_fulfilled(self) -> bool:
        return self.total_suggested == self.total_requested

    def accepted_lines(self) -> List[AllocationLine]:
        return [line for line in self.lines if line.suggested_qty > 0]

    def to_dict(self):
        return {
            'product_variant_id': self.product_variant_id,
            'warehouse_id': self.warehouse_id,
            'warehouse_available': self.warehouse_available,
            'total_requested': self.total_requested,
            'total_suggested': self.total_suggested,
            'fully_fulfilled': self.fully_fulfilled,
            'lines': [line.to_dict() for line in self.lines],
        }


class AllocationProposalEngine:

    def __init__(self, context):
        self.context = context
        self.signals = DemandSignals(context)

    def propose(self, product_variant_id: int) -> AllocationProposal:
        """
        Propose how to split warehouse stock of a variant across stores.

        Raises:
            NotFoundError: Unknown variant, no active warehouse, or no warehouse
                stock entry for the variant
        """
        session = self.context.session
        policy = self.context.policy

        variant = session.get(ProductVariant, product_variant_id)
        if variant is None:
            raise NotFoundError(f"Product variant {product_variant_id} not found")
        warehouse = self.active_warehouse()
        if warehouse is None:
            raise NotFoundError("No active warehouse location")
        warehouse_level = session.query(InventoryLevel).filter_by(
            product_variant_id=product_variant_id, location_id=warehouse.id
        ).first()
        if warehouse_level is None:
            raise NotFoundError(f"No warehouse stock entry for variant {product_variant_id} at {warehouse.code}")

        available = int(math.floor(warehouse_level.quantity_available))
        stores = session.query(Location).filter(
            Location.location_type == LocationType.STORE.value,
            Location.is_active.is_(True),
        ).order_by(Location.code).all()

        on_hand = dict(session.query(InventoryLevel.location_id, InventoryLevel.quantity_on_hand).filter(
            InventoryLevel.product_variant_id == product_variant_id,
            InventoryLevel.location_id.in_([store.id for store in stores]),
        ).all()) if stores else {}
        demand = self.signals.weekly_demand((product_variant_id, store.id) for store in stores)

        lines = []
        for store in stores:
            signal = demand[(product_variant_id, store.id)]
            store_on_hand = on_hand.get(store.id) or 0.0
            target = signal.daily_qty * policy.target_cover_days
            need = deficiency(target, store_on_hand)
            lines.append(AllocationLine(
                location_id=store.id,
                location_code=store.code,
                revenue_tier=store.revenue_tier,
                on_hand=store_on_hand,
                weekly_demand=signal.weekly_qty,
                demand_source=signal.source,
                target_stock=target,
                deficiency=need,
                score=need * policy.tier_weight(store.revenue_tier),
            ))

        lines.sort(key=lambda line: rank_key(line.score, line.location_code))
        shares = proportional_shares(available, [line.score for line in lines])
        allocated = largest_remainder(
            [ShareRequest(line.location_id, share, line.deficiency) for line, share in zip(lines, shares)],
            available,
        )
        for line, qty in zip(lines, allocated):
            line.suggested_qty = qty

        proposal = AllocationProposal(product_variant_id, warehouse.id, available, lines)
        logger.debug(
            f"Allocation for variant {product_variant_id}: {proposal.total_suggested}/{available} units "
            f"across {len(proposal.accepted_lines())} stores"
        )
        return proposal

    def active_warehouse(self) -> Optional[Location]:
        return self.context.session.query(Location).filter(
            Location.location_type == LocationType.WAREHOUSE.value,
            Location.is_active.is_(True),
        ).order_by(Location.code).first()

    def variants_needing_allocation(self) -> List[dict]:
        """Active variants with warehouse stock and at least one store below target"""
        warehouse = self.active_warehouse()
        if warehouse is None:
            return []
        levels = self.context.session.query(InventoryLevel).join(
            ProductVariant, ProductVariant.id == InventoryLevel.product_variant_id
        ).filter(
            InventoryLevel.location_id == warehouse.id,
            ProductVariant.is_active.is_(True),
        ).order_by(InventoryLevel.product_variant_id).all()

        candidates = []
        for level in levels:
            if level.quantity_available < 1:
                continue
            proposal = self.propose(level.product_variant_id)
            if proposal.total_requested > 0:
                candidates.append({
                    'product_variant_id': proposal.product_variant_id,
                    'sku': level.product_variant.sku,
                    'warehouse_id': proposal.warehouse_id,
                    'warehouse_available': proposal.warehouse_available,
                    'total_requested': proposal.total_requested,
                    'stores_below_target': sum(1 for line in proposal.lines if line.deficiency > 0),
                })
        return candidates
