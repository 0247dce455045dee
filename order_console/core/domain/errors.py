"""Workflow error taxonomy.

Every error here is locally recoverable: the operator may simply retry the
action. Nothing in the core retries mutations automatically.
"""

from __future__ import annotations

from order_console.core.domain.reject_reasons import describe


class WorkflowError(Exception):
    """Base class for all console workflow errors."""


class ValidationError(WorkflowError):
    """Input rejected locally, before any collaborator call."""

    def __init__(self, reason: str, message: str | None = None) -> None:
        self.reason = reason
        super().__init__(message or describe(reason))


class IllegalTransitionError(WorkflowError):
    """A lifecycle rule refused the requested transition."""

    def __init__(self, reason: str, message: str | None = None) -> None:
        self.reason = reason
        super().__init__(message or describe(reason))


class TransportError(WorkflowError):
    """A collaborator call failed; no local state was changed.

    The message names the attempted action and carries the collaborator's
    own message verbatim when one was provided.
    """

    def __init__(self, action: str, detail: str | None = None) -> None:
        self.action = action
        self.detail = detail
        if detail:
            message = f"Failed to {action}: {detail}"
        else:
            message = f"Failed to {action}"
        super().__init__(message)


class GateUnavailableError(WorkflowError):
    """The production-status query could not be completed."""

    def __init__(self, order_id: int, cause: Exception | None = None) -> None:
        self.order_id = order_id
        self.cause = cause
        super().__init__(f"production status unavailable for order {order_id}: {cause}")


class OrderServiceError(Exception):
    """Raised by order-service adapters when a backend call fails.

    ``message`` is the backend's own error message when one was returned.
    """

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message or "order service request failed")


class OrderNotFoundError(WorkflowError):
    """The order is not part of the current snapshot."""

    def __init__(self, order_id: int) -> None:
        self.order_id = order_id
        super().__init__(f"Order #{order_id} is not in the current snapshot")
