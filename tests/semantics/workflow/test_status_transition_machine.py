"""
Semantic test: fulfillment transitions through the production gate.

Invariants:
- Gated targets are refused whenever the gate reports completion = false,
  including when the gate is unreachable (fail closed).
- Cancellation of an accepted, non-cancelled order is always permitted.
- Refusals happen before the backend mutation is attempted.
- A permitted transition updates the order and refreshes the snapshot.
"""

from __future__ import annotations

import pytest

from order_console.core.domain.errors import (
    IllegalTransitionError,
    OrderServiceError,
    TransportError,
)
from order_console.core.domain.reject_reasons import RejectReason
from order_console.core.domain.types import ProductionStatus
from order_console.core.events.events import FulfillmentTransitionEvent, TransitionRefusedEvent
from order_console.core.sync.sync_controller import SyncController
from order_console.core.workflow.production_gate import ProductionGate
from order_console.core.workflow.status_transitions import StatusTransitionMachine


def _machine(service, refresher, bus) -> StatusTransitionMachine:
    gate = ProductionGate(service, bus, max_attempts=2, retry_delay_seconds=0)
    return StatusTransitionMachine(service, gate, refresher, bus)


@pytest.mark.asyncio
async def test_delivery_waits_for_production(make_order, fake_service, config, recording_bus) -> None:
    bus, sink = recording_bus
    fake_service.orders = {10: make_order(10, acceptance="accepted", status="processing")}
    fake_service.production[10] = ProductionStatus(is_completed=False, message="Production in progress")
    sync = SyncController(fake_service, config, event_bus=bus)
    await sync.refresh()
    machine = _machine(fake_service, sync, bus)

    with pytest.raises(IllegalTransitionError) as exc_info:
        await machine.transition(sync.store.get(10), "delivered")

    assert exc_info.value.reason == RejectReason.PRODUCTION_INCOMPLETE
    assert "Production in progress" in str(exc_info.value)
    assert sync.store.get(10).fulfillment_status == "processing"
    assert "update_order_status" not in fake_service.call_names()
    assert sink.of_type(TransitionRefusedEvent)[0].target_status == "delivered"

    # Production finishes later
    fake_service.production[10] = ProductionStatus(is_completed=True, message="Production complete")

    updated = await machine.transition(sync.store.get(10), "delivered")

    assert updated.fulfillment_status == "delivered"
    assert sync.store.get(10).fulfillment_status == "delivered"
    assert sync.statistics.delivered == 1
    assert fake_service.call_names()[-3:] == ["get_production_status", "update_order_status", "list_orders"]
    event = sink.of_type(FulfillmentTransitionEvent)[0]
    assert (event.prev_status, event.next_status) == ("processing", "delivered")


@pytest.mark.asyncio
@pytest.mark.parametrize("current", ["pending", "processing", "ready_for_delivery", "delivered", "completed"])
@pytest.mark.parametrize("target", ["ready_for_delivery", "delivered", "completed"])
async def test_gated_targets_refused_for_any_current_state(
    make_order, fake_service, refresher, recording_bus, current, target
) -> None:
    if current == target:
        pytest.skip("same-state request is refused for a different reason")
    bus, _ = recording_bus
    order = make_order(20, acceptance="accepted", status=current)
    machine = _machine(fake_service, refresher, bus)

    with pytest.raises(IllegalTransitionError) as exc_info:
        await machine.transition(order, target)

    assert exc_info.value.reason == RejectReason.PRODUCTION_INCOMPLETE
    assert "update_order_status" not in fake_service.call_names()
    assert refresher.count == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("current", ["pending", "processing", "ready_for_delivery", "delivered", "completed"])
async def test_cancellation_ignores_the_gate(make_order, fake_service, refresher, recording_bus, current) -> None:
    bus, _ = recording_bus
    order = make_order(21, acceptance="accepted", status=current)
    fake_service.orders = {21: order}
    fake_service.fail["get_production_status"] = OrderServiceError("down")

    updated = await _machine(fake_service, refresher, bus).transition(order, "cancelled")

    assert updated.fulfillment_status == "cancelled"
    assert "get_production_status" not in fake_service.call_names()
    assert refresher.count == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("error_type", [OrderServiceError, ValueError])
async def test_unreachable_gate_denies(make_order, fake_service, refresher, recording_bus, error_type) -> None:
    bus, _ = recording_bus
    order = make_order(22, acceptance="accepted", status="processing")
    fake_service.orders = {22: order}
    fake_service.production[22] = ProductionStatus(is_completed=True, message="Done")
    fake_service.fail["get_production_status"] = [error_type("down"), error_type("down")]

    with pytest.raises(IllegalTransitionError) as exc_info:
        await _machine(fake_service, refresher, bus).transition(order, "completed")

    assert exc_info.value.reason == RejectReason.PRODUCTION_INCOMPLETE
    assert "Unable to check production status" in str(exc_info.value)
    assert fake_service.orders[22].fulfillment_status == "processing"


@pytest.mark.asyncio
async def test_processing_may_jump_to_completed(make_order, fake_service, refresher, recording_bus) -> None:
    bus, _ = recording_bus
    order = make_order(23, acceptance="accepted", status="processing")
    fake_service.orders = {23: order}
    fake_service.production[23] = ProductionStatus(is_completed=True, message="Done")

    updated = await _machine(fake_service, refresher, bus).transition(order, "completed")

    assert updated.fulfillment_status == "completed"


@pytest.mark.asyncio
async def test_static_refusals_happen_before_any_call(make_order, fake_service, refresher, recording_bus) -> None:
    bus, _ = recording_bus
    machine = _machine(fake_service, refresher, bus)

    with pytest.raises(IllegalTransitionError) as exc_info:
        await machine.transition(make_order(24, acceptance="accepted", status="processing"), "processing")
    assert exc_info.value.reason == RejectReason.ALREADY_IN_STATE

    with pytest.raises(IllegalTransitionError) as exc_info:
        await machine.transition(make_order(25, acceptance="pending"), "delivered")
    assert exc_info.value.reason == RejectReason.NOT_ACCEPTED

    with pytest.raises(IllegalTransitionError) as exc_info:
        await machine.transition(make_order(26, acceptance="accepted", status="cancelled"), "cancelled")
    assert exc_info.value.reason == RejectReason.ALREADY_IN_STATE

    with pytest.raises(IllegalTransitionError) as exc_info:
        await machine.transition(make_order(27, acceptance="accepted", status="processing"), "pending")
    assert exc_info.value.reason == RejectReason.UNSUPPORTED_TARGET

    assert fake_service.calls == []
    assert refresher.count == 0


@pytest.mark.asyncio
async def test_backend_failure_leaves_status_unchanged(make_order, fake_service, refresher, recording_bus) -> None:
    bus, _ = recording_bus
    order = make_order(28, acceptance="accepted", status="pending")
    fake_service.orders = {28: order}
    fake_service.fail["update_order_status"] = OrderServiceError("Order is locked")

    with pytest.raises(TransportError) as exc_info:
        await _machine(fake_service, refresher, bus).transition(order, "processing")

    assert str(exc_info.value) == "Failed to update order status: Order is locked"
    assert fake_service.orders[28].fulfillment_status == "pending"
    assert order.fulfillment_status == "pending"
    assert refresher.count == 0


def test_available_targets(make_order, fake_service, refresher, recording_bus) -> None:
    bus, _ = recording_bus
    machine = _machine(fake_service, refresher, bus)
    order = make_order(29, acceptance="accepted", status="processing")

    in_progress = ProductionStatus(is_completed=False, message="Sanding")
    options = {o.target: o for o in machine.available_targets(order, in_progress)}

    assert list(options) == ["processing", "ready_for_delivery", "delivered", "completed", "cancelled"]
    assert options["processing"].is_current and not options["processing"].allowed
    assert options["ready_for_delivery"].reason == RejectReason.PRODUCTION_INCOMPLETE
    assert options["cancelled"].allowed

    unknown = {o.target: o for o in machine.available_targets(order)}
    assert unknown["completed"].allowed
