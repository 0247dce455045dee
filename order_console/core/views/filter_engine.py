"""Order filtering for the operator views.

Pure functions mapping a full order collection plus the operator's
selections to the ordered subsequence that should be displayed. Stages run
in a fixed sequence, each narrowing the previous result:

1. acceptance-status slice (view)
2. free-text search
3. exact-match filters (fulfillment status, payment method, acceptance status)
4. inclusive date range (only when both bounds are set)
5. product-type bucket
"""

from __future__ import annotations

from datetime import datetime, time
from typing import TYPE_CHECKING, Iterable

from order_console.core.domain.types import PRODUCT_FAMILIES

if TYPE_CHECKING:
    from order_console.core.domain.types import (
        FilterCriteria,
        LineItem,
        Order,
        ProductTypeSelector,
        ViewSelector,
    )

# Reserved product-name token identifying the alkansya product family.
ALKANSYA_TOKEN: str = "alkansya"

_DAY_START: time = time(0, 0, 0, 0)
_DAY_END: time = time(23, 59, 59, 999_000)


# ---------------------------------------------------------------------------
# Product classification
# ---------------------------------------------------------------------------


def classify_item(item: LineItem, *, reserved_token: str = ALKANSYA_TOKEN) -> str | None:
    """Return the product family of a line item, or None if it has none.

    A recognised product category (case-folded) wins. Otherwise, including
    for unknown category labels, the family is inferred from the product
    name: names containing the reserved token (case-folded) are alkansya, all
    other names are furniture. Unnamed products have no family.
    """
    product = item.product
    if product is None:
        return None

    if product.category:
        family = product.category.strip().casefold()
        if family in PRODUCT_FAMILIES:
            return family

    if not product.name:
        return None

    if reserved_token.casefold() in product.name.casefold():
        return "alkansya"
    return "furniture"


def matches_product_type(
    order: Order,
    product_type: ProductTypeSelector,
    *,
    reserved_token: str = ALKANSYA_TOKEN,
) -> bool:
    """Return True if any line item of the order belongs to the requested bucket."""
    if product_type == "all":
        return True
    return any(
        classify_item(item, reserved_token=reserved_token) == product_type
        for item in order.items
    )


# ---------------------------------------------------------------------------
# Individual predicates
# ---------------------------------------------------------------------------


def matches_search(order: Order, search: str) -> bool:
    """Substring search over id, customer name, customer email and phone.

    id, name and email are compared case-insensitively; the phone number is
    compared as typed. Missing fields never match.
    """
    if not search:
        return True

    needle = search.lower()

    if needle in str(order.id):
        return True

    user = order.user
    if user is not None:
        if user.name and needle in user.name.lower():
            return True
        if user.email and needle in user.email.lower():
            return True

    if order.contact_phone and search in order.contact_phone:
        return True

    return False


def _naive(ts: datetime) -> datetime:
    # Date bounds are calendar days of the recorded checkout wall clock.
    return ts.replace(tzinfo=None) if ts.tzinfo is not None else ts


def date_bounds(criteria: FilterCriteria) -> tuple[datetime, datetime] | None:
    """Return the inclusive (start, end) datetimes, or None if the range is not set."""
    if criteria.start_date is None or criteria.end_date is None:
        return None
    start = datetime.combine(criteria.start_date, _DAY_START)
    end = datetime.combine(criteria.end_date, _DAY_END)
    return start, end


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def filter_orders(
    orders: Iterable[Order],
    view: ViewSelector,
    product_type: ProductTypeSelector,
    criteria: FilterCriteria,
    *,
    reserved_token: str = ALKANSYA_TOKEN,
) -> list[Order]:
    """Return the orders visible under the given view, product type and criteria.

    The result preserves input order. The input is never modified.
    """
    filtered: list[Order] = list(orders)

    # View slice
    if view != "all":
        filtered = [o for o in filtered if o.acceptance_status == view]

    # Search
    if criteria.search:
        filtered = [o for o in filtered if matches_search(o, criteria.search)]

    # Exact-match filters
    if criteria.status is not None:
        filtered = [o for o in filtered if o.fulfillment_status == criteria.status]

    if criteria.payment_method is not None:
        filtered = [o for o in filtered if o.payment_method == criteria.payment_method]

    if criteria.acceptance_status is not None:
        filtered = [o for o in filtered if o.acceptance_status == criteria.acceptance_status]

    # Date range
    bounds = date_bounds(criteria)
    if bounds is not None:
        start, end = bounds
        filtered = [o for o in filtered if start <= _naive(o.checkout_date) <= end]

    # Product type
    if product_type != "all":
        filtered = [
            o
            for o in filtered
            if matches_product_type(o, product_type, reserved_token=reserved_token)
        ]

    return filtered
