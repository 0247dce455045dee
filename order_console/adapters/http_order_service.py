"""HTTP adapter for the backend order service.

Maps the OrderService protocol onto the backend REST routes:

    GET  /orders
    POST /orders/{id}/accept             {"admin_notes"}
    POST /orders/{id}/reject             {"rejection_reason", "admin_notes"}
    PUT  /orders/{id}/status             {"status"}
    GET  /orders/{id}/production-status

Transport failures and non-2xx responses are raised as OrderServiceError,
carrying the backend's ``message`` field verbatim when the body has one.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from order_console.core.domain.errors import OrderServiceError
from order_console.core.domain.types import Order, ProductionStatus

LOGGER = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return None


class HttpOrderService:
    """OrderService implementation on top of httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout, headers=headers)
        else:
            client.headers.update(headers)
        self._client = client

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpOrderService:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, *, json: dict[str, Any] | None = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise OrderServiceError(
                _error_message(exc.response),
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise OrderServiceError(str(exc) or type(exc).__name__) from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise OrderServiceError(f"invalid JSON from {path}") from exc

    # ---- OrderService ----

    async def list_orders(self) -> list[Order]:
        payload = await self._request("GET", "/orders")
        if isinstance(payload, dict) and "data" in payload:
            payload = payload["data"]
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise OrderServiceError("unexpected /orders payload")

        orders: list[Order] = []
        for raw in payload:
            try:
                orders.append(Order.model_validate(raw))
            except PydanticValidationError as exc:
                # One malformed record must not hide the rest of the snapshot.
                order_id = raw.get("id") if isinstance(raw, dict) else None
                LOGGER.warning("Skipping invalid order record %s: %s", order_id, exc)
        return orders

    async def accept_order(self, order_id: int, notes: str | None = None) -> int:
        payload = await self._request(
            "POST",
            f"/orders/{order_id}/accept",
            json={"admin_notes": notes or ""},
        )
        if isinstance(payload, dict):
            try:
                return int(payload.get("productions_created") or 0)
            except (TypeError, ValueError):
                return 0
        return 0

    async def reject_order(self, order_id: int, reason: str, notes: str | None = None) -> None:
        await self._request(
            "POST",
            f"/orders/{order_id}/reject",
            json={"rejection_reason": reason, "admin_notes": notes or ""},
        )

    async def update_order_status(self, order_id: int, status: str) -> None:
        await self._request("PUT", f"/orders/{order_id}/status", json={"status": status})

    async def get_production_status(self, order_id: int) -> ProductionStatus:
        payload = await self._request("GET", f"/orders/{order_id}/production-status")
        try:
            return ProductionStatus.model_validate(payload or {})
        except PydanticValidationError as exc:
            raise OrderServiceError(f"invalid production status for order {order_id}") from exc
