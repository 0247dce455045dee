"""Console session wiring.

OrderConsole assembles the sync controller, the production gate and the two
workflows around a single OrderService and EventBus, and resolves order ids
against the current snapshot for callers that only know the id.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from order_console.core.domain.errors import IllegalTransitionError, OrderNotFoundError
from order_console.core.domain.reject_reasons import RejectReason
from order_console.core.events.event_bus import EventBus
from order_console.core.events.sinks.sink_logging import LoggingEventSink
from order_console.core.sync.sync_controller import SyncController
from order_console.core.workflow.acceptance import AcceptanceWorkflow
from order_console.core.workflow.production_gate import ProductionGate
from order_console.core.workflow.status_transitions import StatusTransitionMachine

if TYPE_CHECKING:
    from order_console.config.console_config import ConsoleConfig
    from order_console.core.domain.types import (
        AcceptanceResult,
        FulfillmentStatus,
        Order,
        ProductionStatus,
    )
    from order_console.core.ports.order_service import OrderService

LOGGER = logging.getLogger(__name__)


class OrderConsole:
    """One operator session against the order backend."""

    def __init__(
        self,
        service: OrderService,
        config: ConsoleConfig,
        *,
        event_bus: EventBus | None = None,
    ) -> None:
        if event_bus is None:
            event_bus = EventBus(sinks=[LoggingEventSink(logging.getLogger("order_console.events"))])
        self.config = config
        self.event_bus = event_bus
        self.service = service

        self.sync = SyncController(service, config, event_bus=event_bus)
        self.gate = ProductionGate(
            service,
            event_bus,
            max_attempts=config.gate_max_attempts,
            retry_delay_seconds=config.gate_retry_delay_seconds,
            timeout_seconds=config.gate_timeout_seconds,
        )
        self.acceptance = AcceptanceWorkflow(service, self.sync, event_bus)
        self.transitions = StatusTransitionMachine(service, self.gate, self.sync, event_bus)

    async def __aenter__(self) -> OrderConsole:
        await self.sync.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.sync.stop()
        self.event_bus.close()

    def order(self, order_id: int) -> Order:
        """Return an order from the current snapshot."""
        order = self.sync.store.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def accept(self, order_id: int, notes: str | None = None) -> AcceptanceResult:
        return await self.acceptance.accept(self.order(order_id), notes)

    async def reject(self, order_id: int, reason: str, notes: str | None = None) -> Order:
        return await self.acceptance.reject(self.order(order_id), reason, notes)

    async def set_status(self, order_id: int, status: FulfillmentStatus) -> Order:
        return await self.transitions.transition(self.order(order_id), status)

    async def production_status(self, order_id: int) -> ProductionStatus:
        order = self.order(order_id)
        if not order.is_accepted():
            raise IllegalTransitionError(RejectReason.NOT_ACCEPTED, f"Order #{order_id} has not been accepted")
        return await self.gate.query_completion(order_id)
