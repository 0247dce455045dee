"""In-memory order snapshot.

The store is a full-snapshot cache of the backend order collection. Each
refresh replaces the whole snapshot; there is no merge and no incremental
update, so the latest completed fetch always wins.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterable, Iterator

if TYPE_CHECKING:
    from order_console.core.domain.types import Order


class OrderStore:
    """Holds the last fetched order snapshot.

    Only the sync controller writes to the store. Readers get an immutable
    tuple and must not assume it stays current across awaits.
    """

    def __init__(self) -> None:
        self._orders: tuple[Order, ...] = ()
        self._by_id: dict[int, Order] = {}
        self.fetched_at: datetime | None = None
        # Incremented on every replace; 0 means never loaded.
        self.version: int = 0

    def replace(self, orders: Iterable[Order]) -> None:
        """Replace the snapshot with a freshly fetched collection."""
        snapshot = tuple(orders)
        self._orders = snapshot
        self._by_id = {o.id: o for o in snapshot}
        self.fetched_at = datetime.now(timezone.utc)
        self.version += 1

    @property
    def orders(self) -> tuple[Order, ...]:
        return self._orders

    @property
    def is_loaded(self) -> bool:
        return self.version > 0

    def get(self, order_id: int) -> Order | None:
        """Return the order with the given id from the current snapshot."""
        return self._by_id.get(order_id)

    def __len__(self) -> int:
        return len(self._orders)

    def __iter__(self) -> Iterator[Order]:
        return iter(self._orders)
