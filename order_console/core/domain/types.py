"""Core shared data models.

This module defines the canonical Pydantic models used across the console for
orders, production status, filter criteria and derived statistics. Field names
follow the backend JSON payload so snapshots can be validated as-is; unknown
payload keys are ignored.
"""

# pylint: disable=line-too-long,missing-class-docstring,missing-function-docstring
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Literal, get_args
from urllib.parse import parse_qs

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

AcceptanceStatus = Literal["pending", "accepted", "rejected"]
FulfillmentStatus = Literal[
    "pending",
    "processing",
    "ready_for_delivery",
    "delivered",
    "completed",
    "cancelled",
]
ViewSelector = Literal["pending", "accepted", "rejected", "all"]
ProductTypeSelector = Literal["all", "furniture", "alkansya"]
ProductFamily = Literal["furniture", "alkansya"]

ACCEPTANCE_STATUSES: frozenset[str] = frozenset(get_args(AcceptanceStatus))
FULFILLMENT_STATUSES: frozenset[str] = frozenset(get_args(FulfillmentStatus))
PRODUCT_FAMILIES: frozenset[str] = frozenset(get_args(ProductFamily))

# Payment methods are open-ended on the backend; these are the known values.
PAYMENT_COD: str = "cod"
PAYMENT_MAYA: str = "Maya"


# ---------------------------------------------------------------------------
# Order payload models
# ---------------------------------------------------------------------------


class Customer(BaseModel):
    name: str | None = None
    email: str | None = None

    model_config = ConfigDict(extra="ignore")


class Product(BaseModel):
    name: str | None = None
    # Product family hint. Older payloads omit it and other catalogues use
    # their own labels; anything that is not a known family (case-folded)
    # falls back to the product name.
    category: str | None = None

    model_config = ConfigDict(extra="ignore")


class LineItem(BaseModel):
    id: int | None = None
    product: Product | None = None
    quantity: int = Field(..., ge=0)
    price: float = Field(..., ge=0, description="Unit price.")

    model_config = ConfigDict(extra="ignore")

    def line_total(self) -> float:
        return self.quantity * self.price


class Order(BaseModel):
    """A customer order as held in the snapshot.

    Notes:
    - fulfillment_status is carried on the wire as ``status``.
    - acceptance_status moves once from pending to a terminal value.
    - a rejected order always carries a non-blank rejection_reason.
    """

    id: int = Field(..., description="Stable, unique order identifier.")

    user: Customer | None = None
    contact_phone: str | None = None
    shipping_address: str | None = None

    items: list[LineItem] = Field(default_factory=list)
    total_price: float = Field(..., ge=0)
    payment_method: str = Field(..., min_length=1)
    checkout_date: datetime

    acceptance_status: AcceptanceStatus = "pending"
    fulfillment_status: FulfillmentStatus = Field("pending", alias="status")

    admin_notes: str | None = None
    rejection_reason: str | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("items", mode="before")
    @classmethod
    def _none_items_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @model_validator(mode="after")
    def validate_rejection_reason(self) -> Order:
        """A rejected order must say why it was rejected."""
        if self.acceptance_status == "rejected":
            if self.rejection_reason is None or not self.rejection_reason.strip():
                raise ValueError("rejection_reason is required when acceptance_status is 'rejected'")
        return self

    def is_pending(self) -> bool:
        return self.acceptance_status == "pending"

    def is_accepted(self) -> bool:
        return self.acceptance_status == "accepted"

    def is_rejected(self) -> bool:
        return self.acceptance_status == "rejected"

    def items_total(self) -> float:
        return float(sum(item.line_total() for item in self.items))

    def has_consistent_total(self, tolerance: float = 0.005) -> bool:
        """Return True if total_price matches the sum of its line items."""
        return abs(self.total_price - self.items_total()) <= tolerance


# ---------------------------------------------------------------------------
# Production tracking
# ---------------------------------------------------------------------------


class ProductionStatus(BaseModel):
    """Completion report from the production-tracking collaborator.

    ``available`` is not part of the payload: it is False only for the
    fail-closed default built locally when the collaborator cannot be reached.
    """

    is_completed: bool = Field(False, alias="isCompleted")
    message: str = ""
    stage: str | None = None
    progress: float | None = Field(default=None, ge=0, le=100)
    details: str | None = None

    available: bool = True

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ---------------------------------------------------------------------------
# Filtering and statistics
# ---------------------------------------------------------------------------


class FilterCriteria(BaseModel):
    """Operator-supplied narrowing applied after the view slice."""

    search: str = ""
    status: FulfillmentStatus | None = None
    payment_method: str | None = None
    acceptance_status: AcceptanceStatus | None = None
    start_date: date | None = None
    end_date: date | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("status", "payment_method", "acceptance_status", "start_date", "end_date", mode="before")
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("search", mode="before")
    @classmethod
    def _none_search_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def has_date_range(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    def cleared(self) -> FilterCriteria:
        return FilterCriteria()

    @classmethod
    def from_query_string(cls, query: str | None) -> FilterCriteria:
        """Pre-seed criteria from a navigation query string.

        Only the ``status`` parameter is honoured. This is a one-time
        initialisation; later changes to the query are not tracked.
        """
        if not query:
            return cls()

        params = parse_qs(query.lstrip("?"))
        values = params.get("status")
        if not values:
            return cls()

        status = values[0]
        if status not in FULFILLMENT_STATUSES:
            LOGGER.warning("Ignoring unknown status in navigation query: %r", status)
            return cls()

        return cls(status=status)


class OrderStatistics(BaseModel):
    pending: int = 0
    accepted: int = 0
    rejected: int = 0

    processing: int = 0
    ready_for_delivery: int = 0
    delivered: int = 0

    total: int = 0

    model_config = ConfigDict(extra="forbid", frozen=True)


class AcceptanceResult(BaseModel):
    order: Order
    productions_created: int = Field(0, ge=0)

    model_config = ConfigDict(extra="forbid")
