"""
Domain event models.

These events represent immutable facts observed while operating the console:
completed actions, refused transitions and failed collaborator calls. They
are consumed by loggers, recorders and the operator notification layer.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class OrderAcceptedEvent:
    order_id: int
    productions_created: int
    admin_notes: str | None


@dataclass(slots=True)
class OrderRejectedEvent:
    order_id: int
    rejection_reason: str
    admin_notes: str | None


@dataclass(slots=True)
class FulfillmentTransitionEvent:
    order_id: int
    prev_status: str
    next_status: str


@dataclass(slots=True)
class TransitionRefusedEvent:
    order_id: int
    current_status: str
    target_status: str
    reason: str
    message: str


@dataclass(slots=True)
class ActionFailedEvent:
    action: str
    order_id: int | None
    message: str


@dataclass(slots=True)
class ProductionGateUnavailableEvent:
    order_id: int
    attempts: int
    error: str


@dataclass(slots=True)
class SnapshotRefreshedEvent:
    version: int
    order_count: int
