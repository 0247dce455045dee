"""Fulfillment status transitions for accepted orders.

Rule checks that need no collaborator run first and synchronously; only a
transition into a production-gated target triggers a fresh gate query. A
refusal raises before the backend mutation is attempted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from order_console.core.domain.errors import (
    IllegalTransitionError,
    OrderServiceError,
    TransportError,
)
from order_console.core.domain.order_state_machine import (
    FULFILLMENT_TARGETS,
    check_static_transition,
    check_transition,
    requires_production_completion,
)
from order_console.core.domain.reject_reasons import RejectReason, describe
from order_console.core.events.events import (
    ActionFailedEvent,
    FulfillmentTransitionEvent,
    TransitionRefusedEvent,
)

if TYPE_CHECKING:
    from order_console.core.domain.types import FulfillmentStatus, Order, ProductionStatus
    from order_console.core.events.event_bus import EventBus
    from order_console.core.ports.order_service import OrderService, Refresher
    from order_console.core.workflow.production_gate import ProductionGate

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class TargetOption:
    """One selectable fulfillment target and whether it is currently allowed."""

    target: str
    allowed: bool
    reason: str | None
    is_current: bool


class StatusTransitionMachine:
    """Enforces fulfillment transitions, consulting the production gate."""

    def __init__(
        self,
        service: OrderService,
        gate: ProductionGate,
        refresher: Refresher,
        event_bus: EventBus,
    ) -> None:
        self._service = service
        self._gate = gate
        self._refresher = refresher
        self._event_bus = event_bus

    async def transition(self, order: Order, target: FulfillmentStatus) -> Order:
        """Move an accepted order to target and return the updated order.

        Raises:
            IllegalTransitionError: not accepted, already in target, target not
                selectable, or production incomplete / not verifiable.
            TransportError: the backend mutation failed; nothing was applied.
        """
        current = order.fulfillment_status

        reason = check_static_transition(order.acceptance_status, current, target)
        if reason is not None:
            raise self._refused(order, target, reason)

        if requires_production_completion(target):
            production = await self._gate.query_completion(order.id)
            reason = check_transition(order.acceptance_status, current, target, production)
            if reason is not None:
                label = target.replace("_", " ")
                raise self._refused(
                    order,
                    target,
                    reason,
                    f"Cannot mark as {label}: {production.message or describe(reason)}",
                )

        try:
            await self._service.update_order_status(order.id, target)
        except OrderServiceError as exc:
            error = TransportError("update order status", exc.message)
            LOGGER.error("Order #%s: %s", order.id, error)
            self._event_bus.emit(
                ActionFailedEvent(action="update order status", order_id=order.id, message=str(error))
            )
            raise error from exc

        updated = order.model_copy(update={"fulfillment_status": target})
        LOGGER.info("Order #%s status updated %s -> %s", order.id, current, target)
        self._event_bus.emit(
            FulfillmentTransitionEvent(order_id=order.id, prev_status=current, next_status=target)
        )

        await self._refresher.refresh()
        return updated

    def available_targets(
        self,
        order: Order,
        production: ProductionStatus | None = None,
    ) -> list[TargetOption]:
        """Describe every selectable target for an order.

        Without a production status, gated targets are reported as allowed
        when the static rules pass; transition() re-checks with a fresh query.
        """
        options: list[TargetOption] = []
        for target in FULFILLMENT_TARGETS:
            if production is None:
                reason = check_static_transition(order.acceptance_status, order.fulfillment_status, target)
            else:
                reason = check_transition(
                    order.acceptance_status, order.fulfillment_status, target, production
                )
            options.append(
                TargetOption(
                    target=target,
                    allowed=reason is None,
                    reason=reason,
                    is_current=order.fulfillment_status == target,
                )
            )
        return options

    def _refused(
        self,
        order: Order,
        target: str,
        reason: str,
        message: str | None = None,
    ) -> IllegalTransitionError:
        error = IllegalTransitionError(reason, message)
        if reason == RejectReason.PRODUCTION_INCOMPLETE:
            LOGGER.warning("Order #%s -> %s refused: %s", order.id, target, error)
        else:
            LOGGER.info("Order #%s -> %s refused: %s", order.id, target, error)
        self._event_bus.emit(
            TransitionRefusedEvent(
                order_id=order.id,
                current_status=order.fulfillment_status,
                target_status=target,
                reason=reason,
                message=str(error),
            )
        )
        return error
