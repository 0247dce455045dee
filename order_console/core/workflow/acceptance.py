"""Order acceptance workflow.

Accept and reject are the only acceptance transitions, and both start from
pending. The workflow waits for the backend's answer before reporting the new
state; it never patches the snapshot itself. On success it asks the refresher
for a full reload so derived effects computed by the backend (production
records, statistics) become visible.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from order_console.core.domain.errors import (
    IllegalTransitionError,
    OrderServiceError,
    TransportError,
    ValidationError,
)
from order_console.core.domain.order_state_machine import is_valid_acceptance_transition
from order_console.core.domain.reject_reasons import RejectReason
from order_console.core.domain.types import AcceptanceResult
from order_console.core.events.events import (
    ActionFailedEvent,
    OrderAcceptedEvent,
    OrderRejectedEvent,
)

if TYPE_CHECKING:
    from order_console.core.domain.types import Order
    from order_console.core.events.event_bus import EventBus
    from order_console.core.ports.order_service import OrderService, Refresher

LOGGER = logging.getLogger(__name__)


class AcceptanceWorkflow:
    """Executes accept/reject actions against a single order."""

    def __init__(self, service: OrderService, refresher: Refresher, event_bus: EventBus) -> None:
        self._service = service
        self._refresher = refresher
        self._event_bus = event_bus

    @staticmethod
    def _require_transition(order: Order, target: str) -> None:
        if not is_valid_acceptance_transition(order.acceptance_status, target):
            raise IllegalTransitionError(
                RejectReason.NOT_PENDING,
                f"Order #{order.id} is {order.acceptance_status}, not pending acceptance",
            )

    async def accept(self, order: Order, notes: str | None = None) -> AcceptanceResult:
        """Accept a pending order.

        Returns the accepted order and the number of production records the
        backend created for it (possibly zero).

        Raises:
            IllegalTransitionError: the order is not pending.
            TransportError: the backend call failed; nothing was applied.
        """
        self._require_transition(order, "accepted")

        try:
            productions_created = await self._service.accept_order(order.id, notes)
        except OrderServiceError as exc:
            raise self._failed("accept order", order, exc) from exc

        # The accept is already committed; a bogus count must not fail it.
        if productions_created < 0:
            LOGGER.warning(
                "Order #%s: backend reported %d productions created, using 0",
                order.id,
                productions_created,
            )
            productions_created = 0

        accepted = order.model_copy(
            update={
                "acceptance_status": "accepted",
                "admin_notes": notes if notes else order.admin_notes,
            }
        )
        LOGGER.info("Order #%s accepted, %d production(s) created", order.id, productions_created)
        self._event_bus.emit(
            OrderAcceptedEvent(
                order_id=order.id,
                productions_created=productions_created,
                admin_notes=notes,
            )
        )

        await self._refresher.refresh()
        return AcceptanceResult(order=accepted, productions_created=productions_created)

    async def reject(self, order: Order, reason: str, notes: str | None = None) -> Order:
        """Reject a pending order with a non-blank reason.

        Raises:
            ValidationError: reason is blank (checked before anything else).
            IllegalTransitionError: the order is not pending.
            TransportError: the backend call failed; nothing was applied.
        """
        if reason is None or not reason.strip():
            raise ValidationError(RejectReason.MISSING_REJECTION_REASON)

        self._require_transition(order, "rejected")

        try:
            await self._service.reject_order(order.id, reason, notes)
        except OrderServiceError as exc:
            raise self._failed("reject order", order, exc) from exc

        rejected = order.model_copy(
            update={
                "acceptance_status": "rejected",
                "rejection_reason": reason,
                "admin_notes": notes if notes else order.admin_notes,
            }
        )
        LOGGER.info("Order #%s rejected: %s", order.id, reason)
        self._event_bus.emit(
            OrderRejectedEvent(order_id=order.id, rejection_reason=reason, admin_notes=notes)
        )

        await self._refresher.refresh()
        return rejected

    def _failed(self, action: str, order: Order, exc: OrderServiceError) -> TransportError:
        error = TransportError(action, exc.message)
        LOGGER.error("Order #%s: %s", order.id, error)
        self._event_bus.emit(ActionFailedEvent(action=action, order_id=order.id, message=str(error)))
        return error
