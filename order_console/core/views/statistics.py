"""Snapshot statistics."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Iterable

from order_console.core.domain.types import OrderStatistics

if TYPE_CHECKING:
    from order_console.core.domain.types import Order


def compute_statistics(orders: Iterable[Order]) -> OrderStatistics:
    """Count orders per acceptance and fulfillment bucket.

    Always called with the full snapshot, never a filtered view, and
    recomputed from scratch on every refresh. The acceptance and fulfillment
    partitions overlap: an accepted, processing order counts in both.
    """
    acceptance: Counter[str] = Counter()
    fulfillment: Counter[str] = Counter()
    total = 0

    for order in orders:
        acceptance[order.acceptance_status] += 1
        fulfillment[order.fulfillment_status] += 1
        total += 1

    return OrderStatistics(
        pending=acceptance["pending"],
        accepted=acceptance["accepted"],
        rejected=acceptance["rejected"],
        processing=fulfillment["processing"],
        ready_for_delivery=fulfillment["ready_for_delivery"],
        delivered=fulfillment["delivered"],
        total=total,
    )
