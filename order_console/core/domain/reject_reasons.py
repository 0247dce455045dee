"""Stable reason codes for refused workflow actions."""

from __future__ import annotations


class RejectReason:
    """Reason codes attached to refused transitions and validation failures.

    Values are plain strings so they can be logged, recorded and compared
    without importing this module.
    """

    # Fulfillment transitions
    ALREADY_IN_STATE = "already_in_state"
    PRODUCTION_INCOMPLETE = "production_incomplete"
    NOT_ACCEPTED = "not_accepted"
    UNSUPPORTED_TARGET = "unsupported_target"

    # Acceptance transitions
    NOT_PENDING = "not_pending"
    MISSING_REJECTION_REASON = "missing_rejection_reason"


_DESCRIPTIONS: dict[str, str] = {
    RejectReason.ALREADY_IN_STATE: "order is already in that state",
    RejectReason.PRODUCTION_INCOMPLETE: "production must be completed first",
    RejectReason.NOT_ACCEPTED: "order has not been accepted",
    RejectReason.UNSUPPORTED_TARGET: "status cannot be selected for an accepted order",
    RejectReason.NOT_PENDING: "order is no longer pending acceptance",
    RejectReason.MISSING_REJECTION_REASON: "please provide a rejection reason",
}


def describe(reason: str) -> str:
    """Return an operator-facing description for a reason code."""
    return _DESCRIPTIONS.get(reason, reason)
