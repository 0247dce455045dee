"""Command-line entrypoint for one-shot console actions.

Each invocation loads one fresh snapshot, performs a single action and
exits; the periodic refresh is not started.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Sequence, get_args

from order_console.adapters.http_order_service import HttpOrderService
from order_console.config.console_config import ConsoleConfig
from order_console.core.domain.errors import WorkflowError
from order_console.core.domain.order_state_machine import FULFILLMENT_TARGETS
from order_console.core.domain.types import (
    AcceptanceStatus,
    FilterCriteria,
    FulfillmentStatus,
    ProductTypeSelector,
    ViewSelector,
)
from order_console.runtime.console import OrderConsole

if TYPE_CHECKING:
    from order_console.core.domain.types import Order, OrderStatistics
    from order_console.core.ports.order_service import OrderService

LOGGER = logging.getLogger(__name__)

ServiceFactory = Callable[[ConsoleConfig], "OrderService"]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_config(args: argparse.Namespace) -> ConsoleConfig:
    if args.config is not None:
        cfg = ConsoleConfig.from_json_file(args.config)
        if args.base_url:
            cfg = cfg.model_copy(update={"base_url": args.base_url.rstrip("/")})
        return cfg
    if not args.base_url:
        raise SystemExit("Error: one of --config or --base-url must be specified.")
    return ConsoleConfig(base_url=args.base_url)


def _default_service(cfg: ConsoleConfig) -> OrderService:
    return HttpOrderService(
        cfg.base_url,
        timeout=cfg.request_timeout_seconds,
        token=cfg.api_token,
    )


def _format_order(order: Order) -> str:
    customer = order.user.name if order.user is not None and order.user.name else "-"
    payment = "COD" if order.payment_method == "cod" else order.payment_method
    return (
        f"#{order.id:<6} {customer:<24} {len(order.items):>3} items  "
        f"{order.total_price:>10.2f}  {payment:<8} "
        f"{order.acceptance_status:<9} {order.fulfillment_status:<18} "
        f"{order.checkout_date:%Y-%m-%d}"
    )


def _print_statistics(stats: OrderStatistics) -> None:
    print(f"Pending acceptance : {stats.pending}")
    print(f"Accepted           : {stats.accepted}")
    print(f"Rejected           : {stats.rejected}")
    print(f"Processing         : {stats.processing}")
    print(f"Ready for delivery : {stats.ready_for_delivery}")
    print(f"Delivered          : {stats.delivered}")
    print(f"All orders         : {stats.total}")


def _criteria_from_args(args: argparse.Namespace) -> FilterCriteria:
    return FilterCriteria(
        search=args.search or "",
        status=args.status,
        payment_method=args.payment,
        acceptance_status=args.acceptance,
        start_date=args.start,
        end_date=args.end,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="order-console",
        description="Review and transition customer orders",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to console JSON config.")
    parser.add_argument("--base-url", default=None, help="Backend API base URL (overrides config).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List orders in a view.")
    p_list.add_argument("--view", choices=get_args(ViewSelector), default="all")
    p_list.add_argument("--product-type", choices=get_args(ProductTypeSelector), default="all")
    p_list.add_argument("--search", default="")
    p_list.add_argument("--status", choices=get_args(FulfillmentStatus), default=None)
    p_list.add_argument("--payment", default=None)
    p_list.add_argument("--acceptance", choices=get_args(AcceptanceStatus), default=None)
    p_list.add_argument("--start", type=date.fromisoformat, default=None, help="YYYY-MM-DD")
    p_list.add_argument("--end", type=date.fromisoformat, default=None, help="YYYY-MM-DD")

    sub.add_parser("stats", help="Show snapshot statistics.")

    p_accept = sub.add_parser("accept", help="Accept a pending order.")
    p_accept.add_argument("order_id", type=int)
    p_accept.add_argument("--notes", default=None)

    p_reject = sub.add_parser("reject", help="Reject a pending order.")
    p_reject.add_argument("order_id", type=int)
    p_reject.add_argument("--reason", required=True)
    p_reject.add_argument("--notes", default=None)

    p_status = sub.add_parser("set-status", help="Change the fulfillment status of an accepted order.")
    p_status.add_argument("order_id", type=int)
    p_status.add_argument("status", choices=FULFILLMENT_TARGETS)

    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _run(args: argparse.Namespace, cfg: ConsoleConfig, service: OrderService) -> int:
    console = OrderConsole(service, cfg)
    try:
        if not await console.sync.refresh():
            print("Error: failed to load orders", file=sys.stderr)
            return 1

        if args.command == "list":
            console.sync.set_view(args.view)
            console.sync.set_product_type(args.product_type)
            console.sync.set_criteria(_criteria_from_args(args))
            orders = console.sync.visible_orders
            for order in orders:
                print(_format_order(order))
            print(f"{len(orders)} order(s)")
            return 0

        if args.command == "stats":
            _print_statistics(console.sync.statistics)
            return 0

        if args.command == "accept":
            result = await console.accept(args.order_id, args.notes)
            print(f"Order #{args.order_id} accepted! {result.productions_created} production(s) created.")
            return 0

        if args.command == "reject":
            await console.reject(args.order_id, args.reason, args.notes)
            print(f"Order #{args.order_id} rejected")
            return 0

        if args.command == "set-status":
            await console.set_status(args.order_id, args.status)
            print(f"Order #{args.order_id} status updated to {args.status.replace('_', ' ')}")
            return 0

        raise ValueError(f"unknown command: {args.command}")
    except WorkflowError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        console.event_bus.close()
        aclose = getattr(service, "aclose", None)
        if callable(aclose):
            await aclose()


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None, *, service_factory: ServiceFactory | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = _load_config(args)
    factory = service_factory if service_factory is not None else _default_service
    return asyncio.run(_run(args, cfg, factory(cfg)))


if __name__ == "__main__":
    sys.exit(main())
