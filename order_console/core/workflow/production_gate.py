"""Production completion gate.

Queries the production-tracking collaborator for a single order. Results are
never cached: production can finish (or regress) between the moment a list
renders and the moment a transition is attempted.

The gate fails closed. When the collaborator cannot be reached after a
bounded number of attempts, the gate reports "not completed" so that any
transition depending on it is denied.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from order_console.core.domain.errors import GateUnavailableError
from order_console.core.domain.types import ProductionStatus
from order_console.core.events.events import ProductionGateUnavailableEvent

if TYPE_CHECKING:
    from order_console.core.events.event_bus import EventBus
    from order_console.core.ports.order_service import OrderService

LOGGER = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE: str = "Unable to check production status"


def unavailable_status(error: Exception | None = None) -> ProductionStatus:
    """Return the fail-closed default reported when the query cannot be performed."""
    return ProductionStatus(
        is_completed=False,
        message=UNAVAILABLE_MESSAGE,
        details=None if error is None else str(error),
        available=False,
    )


class ProductionGate:
    """Fresh, bounded, fail-closed production status queries."""

    def __init__(
        self,
        service: OrderService,
        event_bus: EventBus,
        *,
        max_attempts: int = 2,
        retry_delay_seconds: float = 0.5,
        timeout_seconds: float = 10.0,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self._service = service
        self._event_bus = event_bus
        self._max_attempts = max_attempts
        self._retry_delay = float(retry_delay_seconds)
        self._timeout = float(timeout_seconds)

    async def query_completion(self, order_id: int) -> ProductionStatus:
        """Return the production status for an order. Never raises."""
        try:
            return await self._fetch(order_id)
        except GateUnavailableError as exc:
            LOGGER.warning("Production gate unavailable for order %s: %s", order_id, exc.cause)
            self._event_bus.emit(
                ProductionGateUnavailableEvent(
                    order_id=order_id,
                    attempts=self._max_attempts,
                    error=str(exc.cause),
                )
            )
            return unavailable_status(exc.cause)

    async def _fetch(self, order_id: int) -> ProductionStatus:
        last_error: Exception | None = None

        for attempt in range(1, self._max_attempts + 1):
            try:
                return await asyncio.wait_for(
                    self._service.get_production_status(order_id),
                    timeout=self._timeout,
                )
            except Exception as exc:  # pylint: disable=broad-exception-caught
                last_error = exc
                LOGGER.debug(
                    "Production status query for order %s failed (attempt %d/%d): %r",
                    order_id,
                    attempt,
                    self._max_attempts,
                    exc,
                )

            if attempt < self._max_attempts and self._retry_delay > 0:
                await asyncio.sleep(self._retry_delay)

        raise GateUnavailableError(order_id, last_error)
