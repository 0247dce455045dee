"""Order service protocol for the console workflows.

This module defines the backend-facing boundary used by the workflows and
the sync controller. Concrete implementations adapt a specific transport
(HTTP, in-memory fakes) to this protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from order_console.core.domain.types import Order, ProductionStatus


class OrderService(Protocol):
    """Backend order service boundary.

    Every method may raise OrderServiceError. Implementations must put the
    backend's own error message on the exception when one is available.
    """

    async def list_orders(self) -> list[Order]:
        """Return the full order collection."""

    async def accept_order(self, order_id: int, notes: str | None = None) -> int:
        """Accept a pending order, returning the number of production records created."""

    async def reject_order(self, order_id: int, reason: str, notes: str | None = None) -> None:
        """Reject a pending order with a reason."""

    async def update_order_status(self, order_id: int, status: str) -> None:
        """Set the fulfillment status of an accepted order."""

    async def get_production_status(self, order_id: int) -> ProductionStatus:
        """Return the current production completion report for an order."""


class Refresher(Protocol):
    """Something that can reload the order snapshot on demand."""

    async def refresh(self) -> bool:
        """Reload the snapshot; return True if it was replaced."""
