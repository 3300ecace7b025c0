"""
Fair allocation of limited warehouse stock

Pure functions with no database access: need scoring, ranking and the
largest-remainder split of an integer quantity.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Hashable, Sequence

DEFICIENCY_PRECISION = 6


@dataclass(frozen=True)
class ShareRequest:
    key: Hashable
    raw_share: float
    cap: int


def deficiency(target_stock: float, on_hand: float) -> int:
    """Whole units needed to bring on-hand up to target"""
    gap = round(max(0.0, target_stock - (on_hand or 0.0)), DEFICIENCY_PRECISION)
    return int(math.ceil(gap))


def rank_key(score: float, code: str):
    """Sort key: score descending, then location code ascending"""
    return (-score, code)


def proportional_shares(total: int, scores: Sequence[float]) -> list[float]:
    score_sum = sum(scores)
    if total <= 0 or score_sum <= 0:
        return [0.0] * len(scores)
    return [total * score / score_sum for score in scores]


def largest_remainder(requests: Sequence[ShareRequest], total: int) -> list[int]:
    """
    Split `total` units across ranked requests.

    Each raw share is capped at its request's cap and floored. Leftover units
    go one at a time to requests in the given order, cycling, until none are
    left or every request is at its cap.

    Args:
        requests: Requests in rank order
        total: Units available

    Returns:
        Allocated units, aligned with requests
    """
    caps = [max(0, int(r.cap)) for r in requests]
    allocated = [
        min(cap, int(math.floor(max(0.0, r.raw_share))))
        for r, cap in zip(requests, caps)
    ]

    # Float error in raw shares can overshoot by a unit; take it back from the lowest ranked
    overshoot = sum(allocated) - max(0, total)
    index = len(allocated) - 1
    while overshoot > 0 and index >= 0:
        taken = min(allocated[index], overshoot)
        allocated[index] -= taken
        overshoot -= taken
        index -= 1

    remainder = max(0, total) - sum(allocated)
    while remainder > 0:
        open_slots = [i for i, cap in enumerate(caps) if allocated[i] < cap]
        if not open_slots:
            break
        for i in open_slots:
            if remainder == 0:
                break
            allocated[i] += 1
            remainder -= 1

    return allocated
