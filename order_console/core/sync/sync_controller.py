"""Snapshot synchronisation and view derivation.

The sync controller owns the order store. It loads the snapshot on start,
refreshes it on a fixed interval through an owned AsyncIOScheduler, and
refreshes on demand after every successful mutation. Filtered views and
statistics are recomputed from scratch whenever the snapshot or the
operator's selections change; nothing derived is patched incrementally.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from order_console.core.domain.errors import OrderServiceError, TransportError
from order_console.core.domain.types import FilterCriteria, OrderStatistics
from order_console.core.events.events import ActionFailedEvent, SnapshotRefreshedEvent
from order_console.core.events.sinks.memory import NullEventBus
from order_console.core.sync.order_store import OrderStore
from order_console.core.views.filter_engine import filter_orders
from order_console.core.views.statistics import compute_statistics

if TYPE_CHECKING:
    from order_console.config.console_config import ConsoleConfig
    from order_console.core.domain.types import Order, ProductTypeSelector, ViewSelector
    from order_console.core.events.event_bus import EventBus
    from order_console.core.ports.order_service import OrderService

LOGGER = logging.getLogger(__name__)

REFRESH_JOB_ID: str = "order_snapshot_refresh"


class SyncController:
    """Keeps the order snapshot and its derived views current."""

    # pylint: disable=too-many-instance-attributes

    def __init__(
        self,
        service: OrderService,
        config: ConsoleConfig,
        *,
        store: OrderStore | None = None,
        event_bus: EventBus | None = None,
        view: ViewSelector = "all",
        product_type: ProductTypeSelector = "all",
        criteria: FilterCriteria | None = None,
    ) -> None:
        self._service = service
        self._config = config
        self._event_bus = event_bus if event_bus is not None else NullEventBus()
        self.store = store if store is not None else OrderStore()

        self._view: ViewSelector = view
        self._product_type: ProductTypeSelector = product_type
        if criteria is None:
            # One-time pre-seed from the navigation query; not a live binding.
            criteria = FilterCriteria.from_query_string(config.initial_query)
        self._criteria = criteria

        self._visible: list[Order] = []
        self._statistics = OrderStatistics()
        self._scheduler: AsyncIOScheduler | None = None

    # ---- Lifecycle ----

    async def start(self) -> None:
        """Load the initial snapshot and schedule periodic refreshes."""
        await self.refresh()

        if self._scheduler is not None and self._scheduler.running:
            return

        scheduler = AsyncIOScheduler(
            jobstores={"default": MemoryJobStore()},
            executors={"default": AsyncIOExecutor()},
            job_defaults={
                "coalesce": True,  # Collapse missed runs into one
                "max_instances": 1,
                "misfire_grace_time": max(1, int(self._config.refresh_interval_seconds)),
            },
        )
        scheduler.add_job(
            self.refresh,
            "interval",
            seconds=self._config.refresh_interval_seconds,
            id=REFRESH_JOB_ID,
            name="Refresh order snapshot",
            replace_existing=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        LOGGER.info(
            "Order snapshot refresh scheduled every %ss",
            self._config.refresh_interval_seconds,
        )

    async def stop(self) -> None:
        """Cancel the periodic refresh. Safe to call more than once."""
        scheduler = self._scheduler
        self._scheduler = None
        if scheduler is not None and scheduler.running:
            scheduler.shutdown(wait=False)
            LOGGER.info("Order snapshot refresh stopped")

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def scheduler(self) -> AsyncIOScheduler | None:
        return self._scheduler

    async def __aenter__(self) -> SyncController:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    # ---- Refresh ----

    async def refresh(self) -> bool:
        """Fetch the full snapshot and replace the store.

        On failure the previous snapshot is kept, the failure is reported and
        False is returned. Overlapping refreshes are not cancelled: whichever
        response arrives last wins.
        """
        try:
            orders = await self._service.list_orders()
        except OrderServiceError as exc:
            error = TransportError("load orders", exc.message)
            LOGGER.error("%s", error)
            self._event_bus.emit(ActionFailedEvent(action="load orders", order_id=None, message=str(error)))
            return False

        self.store.replace(orders)
        self._derive()
        self._event_bus.emit(
            SnapshotRefreshedEvent(version=self.store.version, order_count=len(self.store))
        )
        LOGGER.debug("Order snapshot v%d loaded (%d orders)", self.store.version, len(self.store))
        return True

    # ---- Selections ----

    @property
    def view(self) -> ViewSelector:
        return self._view

    @property
    def product_type(self) -> ProductTypeSelector:
        return self._product_type

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    def set_view(self, view: ViewSelector) -> None:
        self._view = view
        self._derive()

    def set_product_type(self, product_type: ProductTypeSelector) -> None:
        self._product_type = product_type
        self._derive()

    def set_criteria(self, criteria: FilterCriteria) -> None:
        self._criteria = criteria
        self._derive()

    def clear_filters(self) -> None:
        self.set_criteria(self._criteria.cleared())

    # ---- Derived outputs ----

    @property
    def visible_orders(self) -> list[Order]:
        return list(self._visible)

    @property
    def statistics(self) -> OrderStatistics:
        return self._statistics

    def _derive(self) -> None:
        snapshot = self.store.orders
        self._visible = filter_orders(
            snapshot,
            self._view,
            self._product_type,
            self._criteria,
            reserved_token=self._config.alkansya_token,
        )
        # Statistics always describe the full snapshot, never the view.
        self._statistics = compute_statistics(snapshot)
