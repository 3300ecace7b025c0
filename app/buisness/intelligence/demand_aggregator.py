"""
Demand Aggregator

Turns raw sale events into fixed-cadence weekly quantity series per
(variant, location). Missing weeks are zero-filled so every series over the
same window has the same length.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from app.buisness.core.week_calendar import trailing_weeks, week_start, week_start_datetime, to_utc_naive
from app.data.inventory.base import SaleRecord

Pair = Tuple[int, int]


@dataclass(frozen=True)
class WeeklySeries:
    """Weekly quantities for one variant at one location, oldest week first"""

    product_variant_id: int
    location_id: int
    weeks: Tuple[Tuple[date, float], ...]

    @property
    def quantities(self) -> List[float]:
        return [qty for _, qty in self.weeks]

    @property
    def observed(self) -> List[float]:
        """Quantities from the first week with a sale onward"""
        values = self.quantities
        for index, qty in enumerate(values):
            if qty != 0:
                return values[index:]
        return []

    @property
    def history_weeks(self) -> int:
        return len(self.observed)

    def to_dict(self):
        return {
            'product_variant_id': self.product_variant_id,
            'location_id': self.location_id,
            'weeks': [{'week_start': wk.isoformat(), 'quantity': qty} for wk, qty in self.weeks],
        }


def bucket_sales(sales: Iterable[Tuple[int, int, float, datetime]],
                 weeks: Sequence[date]) -> Dict[Pair, List[float]]:
    """
    Sum sale quantities into weekly buckets.

    Args:
        sales: (variant_id, location_id, quantity, occurred_at) tuples
        weeks: Ordered week starts defining the buckets

    Returns:
        Mapping of (variant_id, location_id) to per-week totals; sales outside
        the weeks are ignored
    """
    index = {wk: position for position, wk in enumerate(weeks)}
    buckets: Dict[Pair, List[float]] = defaultdict(lambda: [0.0] * len(weeks))
    for variant_id, location_id, quantity, occurred_at in sales:
        position = index.get(week_start(to_utc_naive(occurred_at)))
        if position is None:
            continue
        buckets[(variant_id, location_id)][position] += float(quantity or 0)
    return dict(buckets)


class DemandAggregator:
    """Reads SaleRecords for a trailing window and builds weekly series"""

    def __init__(self, context):
        self.context = context

    def weekly_series(self, pairs: Optional[Iterable[Pair]] = None,
                      location_id: Optional[int] = None,
                      variant_id: Optional[int] = None,
                      weeks: Optional[int] = None) -> Dict[Pair, WeeklySeries]:
        """
        Build zero-filled weekly series over the last complete weeks.

        Args:
            pairs: Restrict to these (variant_id, location_id) pairs; every
                requested pair gets a series even without sales
            location_id: Restrict to one location
            variant_id: Restrict to one variant
            weeks: Window length in complete weeks (default: policy history_weeks)

        Returns:
            Mapping of pair to WeeklySeries
        """
        week_list = trailing_weeks(
            self.context.now(), self.context.policy.history_weeks if weeks is None else weeks
        )
        requested = list(dict.fromkeys(pairs)) if pairs is not None else None
        if requested is not None and not requested:
            return {}

        query = self.context.session.query(
            SaleRecord.product_variant_id,
            SaleRecord.location_id,
            SaleRecord.quantity,
            SaleRecord.occurred_at,
        ).filter(
            SaleRecord.occurred_at >= week_start_datetime(week_list[0]),
            SaleRecord.occurred_at < week_start_datetime(self.context.now()),
        )
        if location_id is not None:
            query = query.filter(SaleRecord.location_id == location_id)
        if variant_id is not None:
            query = query.filter(SaleRecord.product_variant_id == variant_id)
        if requested is not None:
            query = query.filter(
                SaleRecord.product_variant_id.in_(sorted({pair[0] for pair in requested})),
                SaleRecord.location_id.in_(sorted({pair[1] for pair in requested})),
            )

        buckets = bucket_sales(query.all(), week_list)
        keys = requested if requested is not None else sorted(buckets)
        empty = [0.0] * len(week_list)
        return {
            key: WeeklySeries(key[0], key[1], tuple(zip(week_list, buckets.get(key, empty))))
            for key in keys
        }

    def series_for(self, variant_id: int, location_id: int, weeks: Optional[int] = None) -> WeeklySeries:
        pair = (variant_id, location_id)
        return self.weekly_series(pairs=[pair], weeks=weeks)[pair]

    def trailing_weekly_averages(self, pairs: Optional[Iterable[Pair]] = None,
                                 variant_id: Optional[int] = None,
                                 weeks: Optional[int] = None) -> Dict[Pair, float]:
        """Average weekly sale quantity over the last `weeks` complete weeks (default: velocity_weeks)"""
        if weeks is None:
            weeks = self.context.policy.velocity_weeks
        series = self.weekly_series(pairs=pairs, variant_id=variant_id, weeks=weeks)
        return {pair: sum(s.quantities) / weeks for pair, s in series.items()}
