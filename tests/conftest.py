"""Shared fixtures: an in-memory order backend and order builders."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any, Callable

import pytest

from order_console.config.console_config import ConsoleConfig
from order_console.core.domain.errors import OrderServiceError
from order_console.core.domain.types import Order, ProductionStatus
from order_console.core.events.sinks.memory import recording_event_bus


class FakeOrderService:
    """In-memory OrderService.

    Behaves like the backend for the happy path and lets tests inject
    failures per operation via ``fail``: op name -> error (raised once) or a
    list of errors (raised in turn).
    """

    def __init__(self, orders: list[Order] | None = None) -> None:
        self.orders: dict[int, Order] = {o.id: o for o in orders or []}
        self.production: dict[int, ProductionStatus] = {}
        self.productions_created: dict[int, int] = {}
        self.fail: dict[str, Any] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.production_delay: float = 0.0

    def _maybe_fail(self, op: str) -> None:
        pending = self.fail.get(op)
        if pending is None:
            return
        if isinstance(pending, list):
            if not pending:
                return
            error = pending.pop(0)
        else:
            error = self.fail.pop(op)
        raise error

    async def list_orders(self) -> list[Order]:
        self.calls.append(("list_orders",))
        self._maybe_fail("list_orders")
        return list(self.orders.values())

    async def accept_order(self, order_id: int, notes: str | None = None) -> int:
        self.calls.append(("accept_order", order_id, notes))
        self._maybe_fail("accept_order")
        order = self.orders[order_id]
        if order.acceptance_status != "pending":
            raise OrderServiceError("Order has already been processed", status_code=422)
        self.orders[order_id] = order.model_copy(
            update={"acceptance_status": "accepted", "admin_notes": notes}
        )
        return self.productions_created.get(order_id, len(order.items))

    async def reject_order(self, order_id: int, reason: str, notes: str | None = None) -> None:
        self.calls.append(("reject_order", order_id, reason, notes))
        self._maybe_fail("reject_order")
        order = self.orders[order_id]
        self.orders[order_id] = order.model_copy(
            update={"acceptance_status": "rejected", "rejection_reason": reason, "admin_notes": notes}
        )

    async def update_order_status(self, order_id: int, status: str) -> None:
        self.calls.append(("update_order_status", order_id, status))
        self._maybe_fail("update_order_status")
        order = self.orders[order_id]
        self.orders[order_id] = order.model_copy(update={"fulfillment_status": status})

    async def get_production_status(self, order_id: int) -> ProductionStatus:
        self.calls.append(("get_production_status", order_id))
        if self.production_delay:
            await asyncio.sleep(self.production_delay)
        self._maybe_fail("get_production_status")
        return self.production.get(
            order_id,
            ProductionStatus(is_completed=False, message="Production in progress"),
        )

    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]


class CountingRefresher:
    """Refresher that only counts how often it was asked to reload."""

    def __init__(self) -> None:
        self.count = 0

    async def refresh(self) -> bool:
        self.count += 1
        return True


def build_order(
    order_id: int,
    *,
    acceptance: str = "pending",
    status: str = "pending",
    name: str | None = "Juan Dela Cruz",
    email: str | None = "juan@example.com",
    phone: str | None = "09171234567",
    products: list[str | None] | None = None,
    payment: str = "cod",
    checkout: datetime | None = None,
    rejection_reason: str | None = None,
) -> Order:
    if products is None:
        products = ["Dining Table"]
    items = [
        {"id": i + 1, "product": {"name": p} if p is not None else None, "quantity": 1, "price": 100.0}
        for i, p in enumerate(products)
    ]
    user = None
    if name is not None or email is not None:
        user = {"name": name, "email": email}
    if acceptance == "rejected" and rejection_reason is None:
        rejection_reason = "Out of stock"
    return Order.model_validate(
        {
            "id": order_id,
            "user": user,
            "contact_phone": phone,
            "shipping_address": "Cebu City",
            "items": items,
            "total_price": 100.0 * len(items),
            "payment_method": payment,
            "checkout_date": (checkout or datetime(2025, 3, 10, 12, 0)).isoformat(),
            "acceptance_status": acceptance,
            "status": status,
            "rejection_reason": rejection_reason,
        }
    )


@pytest.fixture
def make_order() -> Callable[..., Order]:
    return build_order


@pytest.fixture
def fake_service() -> FakeOrderService:
    return FakeOrderService()


@pytest.fixture
def refresher() -> CountingRefresher:
    return CountingRefresher()


@pytest.fixture
def config() -> ConsoleConfig:
    return ConsoleConfig(
        base_url="http://backend.test/api",
        gate_max_attempts=2,
        gate_retry_delay_seconds=0,
        gate_timeout_seconds=1,
    )


@pytest.fixture
def recording_bus():
    return recording_event_bus()
