"""
Semantic test: order payload model invariants.

Invariants:
- A rejected order always carries a non-blank rejection reason.
- The wire field ``status`` maps to fulfillment_status.
- Unknown status strings are rejected at parse time.
- Server-asserted totals can be checked against the item sum.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from order_console.core.domain.types import Order, ProductionStatus


def _payload(**overrides):
    payload = {
        "id": 42,
        "user": {"name": "Maria Santos", "email": "maria@example.com"},
        "contact_phone": "09170000042",
        "items": [
            {"id": 1, "product": {"name": "Dining Table"}, "quantity": 2, "price": 1500.0},
            {"id": 2, "product": {"name": "Alkansya Classic"}, "quantity": 3, "price": 250.0},
        ],
        "total_price": 3750.0,
        "payment_method": "cod",
        "checkout_date": "2025-03-10T09:15:00",
        "acceptance_status": "pending",
        "status": "pending",
        "unexpected_backend_field": True,
    }
    payload.update(overrides)
    return payload


def test_payload_parses_with_wire_status_alias() -> None:
    order = Order.model_validate(_payload(status="processing"))

    assert order.fulfillment_status == "processing"
    assert order.is_pending()
    assert order.user is not None and order.user.name == "Maria Santos"


def test_rejected_order_requires_reason() -> None:
    with pytest.raises(PydanticValidationError):
        Order.model_validate(_payload(acceptance_status="rejected"))

    with pytest.raises(PydanticValidationError):
        Order.model_validate(_payload(acceptance_status="rejected", rejection_reason="   "))

    order = Order.model_validate(_payload(acceptance_status="rejected", rejection_reason="Out of stock"))
    assert order.is_rejected()
    assert order.rejection_reason == "Out of stock"


def test_unknown_status_strings_are_rejected() -> None:
    with pytest.raises(PydanticValidationError):
        Order.model_validate(_payload(status="shipped"))

    with pytest.raises(PydanticValidationError):
        Order.model_validate(_payload(acceptance_status="maybe"))


def test_total_price_matches_item_sum() -> None:
    order = Order.model_validate(_payload())

    assert order.items_total() == pytest.approx(3750.0)
    assert order.has_consistent_total()

    inconsistent = Order.model_validate(_payload(total_price=3000.0))
    assert not inconsistent.has_consistent_total()


def test_missing_items_and_customer_are_tolerated() -> None:
    order = Order.model_validate(_payload(items=None, user=None, total_price=0))

    assert order.items == []
    assert order.user is None
    assert order.has_consistent_total()


def test_production_status_payload_alias() -> None:
    status = ProductionStatus.model_validate(
        {"isCompleted": True, "message": "All items produced", "stage": "Packing", "progress": 100}
    )

    assert status.is_completed
    assert status.stage == "Packing"
    assert status.available

    with pytest.raises(PydanticValidationError):
        ProductionStatus.model_validate({"isCompleted": False, "progress": 140})
