"""
Order lifecycle state machine definitions.

This module defines the acceptance and fulfillment states, the allowed
transitions between them and which fulfillment targets are gated on
production completion. It is passive and validation-only: callers decide
what to do with a refusal.

Fulfillment transitions are advisory rather than sequential. Any accepted
order may jump to any selectable target (e.g. processing -> completed) as
long as the gate conditions below hold.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from order_console.core.domain.reject_reasons import RejectReason

if TYPE_CHECKING:
    from order_console.core.domain.types import ProductionStatus


# Allowed acceptance transitions.
#
# Key   : previous acceptance status
# Value : set of allowed next statuses
#
# accepted and rejected are terminal: never reversed, never swapped.
ACCEPTANCE_ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset(
        {
            "accepted",
            "rejected",
        }
    ),
    "accepted": frozenset(),
    "rejected": frozenset(),
}

# Fulfillment targets an operator may select once an order is accepted.
# "pending" is not selectable: processing is the first visible target.
FULFILLMENT_TARGETS: tuple[str, ...] = (
    "processing",
    "ready_for_delivery",
    "delivered",
    "completed",
    "cancelled",
)

# Targets that require the production gate to report completion.
PRODUCTION_GATED_STATES: frozenset[str] = frozenset(
    {
        "ready_for_delivery",
        "delivered",
        "completed",
    }
)


def is_valid_acceptance_transition(prev_status: str, next_status: str) -> bool:
    """Return True if the acceptance transition prev_status -> next_status is allowed."""
    allowed = ACCEPTANCE_ALLOWED_TRANSITIONS.get(prev_status)
    if allowed is None:
        return False
    return next_status in allowed


def requires_production_completion(target: str) -> bool:
    """Return True if moving to target is gated on production completion."""
    return target in PRODUCTION_GATED_STATES


def check_static_transition(acceptance_status: str, current: str, target: str) -> str | None:
    """Check the rules that need no collaborator.

    Returns None when the transition may proceed (subject to the production
    gate for gated targets), otherwise a RejectReason code.
    """
    if acceptance_status != "accepted":
        return RejectReason.NOT_ACCEPTED
    if target not in FULFILLMENT_TARGETS:
        return RejectReason.UNSUPPORTED_TARGET
    if target == current:
        return RejectReason.ALREADY_IN_STATE
    return None


def check_transition(
    acceptance_status: str,
    current: str,
    target: str,
    production: ProductionStatus | None = None,
) -> str | None:
    """Return None if current -> target is permitted, otherwise a RejectReason.

    For gated targets a missing production status counts as incomplete
    (fail-closed). Cancellation is never gated.
    """
    reason = check_static_transition(acceptance_status, current, target)
    if reason is not None:
        return reason

    if requires_production_completion(target):
        if production is None or not production.is_completed:
            return RejectReason.PRODUCTION_INCOMPLETE

    return None
