"""Public API for the order_console package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Adapters and session wiring
# ----------------------------------------------------------------------
from order_console.adapters.http_order_service import HttpOrderService

# ----------------------------------------------------------------------
# Config API
# ----------------------------------------------------------------------
from order_console.config.console_config import ConsoleConfig

# ----------------------------------------------------------------------
# Domain types and errors
# ----------------------------------------------------------------------
from order_console.core.domain.errors import (
    GateUnavailableError,
    IllegalTransitionError,
    OrderNotFoundError,
    OrderServiceError,
    TransportError,
    ValidationError,
    WorkflowError,
)
from order_console.core.domain.reject_reasons import RejectReason
from order_console.core.domain.types import (
    AcceptanceResult,
    AcceptanceStatus,
    Customer,
    FilterCriteria,
    FulfillmentStatus,
    LineItem,
    Order,
    OrderStatistics,
    Product,
    ProductionStatus,
    ProductTypeSelector,
    ViewSelector,
)
from order_console.core.events.event_bus import EventBus
from order_console.core.ports.order_service import OrderService, Refresher

# ----------------------------------------------------------------------
# Sync, views and workflows
# ----------------------------------------------------------------------
from order_console.core.sync.order_store import OrderStore
from order_console.core.sync.sync_controller import SyncController
from order_console.core.views.filter_engine import filter_orders
from order_console.core.views.statistics import compute_statistics
from order_console.core.workflow.acceptance import AcceptanceWorkflow
from order_console.core.workflow.production_gate import ProductionGate
from order_console.core.workflow.status_transitions import StatusTransitionMachine
from order_console.runtime.console import OrderConsole

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Session
    "OrderConsole",
    "HttpOrderService",
    "ConsoleConfig",

    # Domain
    "Order",
    "Customer",
    "Product",
    "LineItem",
    "ProductionStatus",
    "FilterCriteria",
    "OrderStatistics",
    "AcceptanceResult",
    "AcceptanceStatus",
    "FulfillmentStatus",
    "ViewSelector",
    "ProductTypeSelector",
    "RejectReason",

    # Errors
    "WorkflowError",
    "ValidationError",
    "IllegalTransitionError",
    "TransportError",
    "GateUnavailableError",
    "OrderNotFoundError",
    "OrderServiceError",

    # Ports
    "OrderService",
    "Refresher",
    "EventBus",

    # Components
    "OrderStore",
    "SyncController",
    "filter_orders",
    "compute_statistics",
    "AcceptanceWorkflow",
    "ProductionGate",
    "StatusTransitionMachine",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("order-console")
except PackageNotFoundError:
    __version__ = "0.0.0"
