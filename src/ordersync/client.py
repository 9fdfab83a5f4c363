"""High-level async HTTP client for the shipping order backend."""

from __future__ import annotations

from typing import Any

import aiohttp

from ordersync._api import orders as _orders_api
from ordersync._transport import HttpTransport
from ordersync.config import SyncConfig
from ordersync.exceptions import OrderSyncError
from ordersync.models.order import Order, OrderStatus
from ordersync.models.requests import TrackingAssignment
from ordersync.session import Session


class OrderSyncClient:
    """Async client implementing the :class:`~ordersync.backend.Backend` protocol.

    Usage::

        async with OrderSyncClient(config, session) as client:
            orders = await client.fetch_orders()
    """

    def __init__(
        self,
        config: SyncConfig,
        session: Session,
        *,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._session = session
        self._external_session = http_session is not None
        self._http_session = http_session
        self._transport: HttpTransport | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> OrderSyncClient:
        await self.open()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def open(self) -> None:
        if self._transport is not None:
            return
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._session, self._http_session)

    async def close(self) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise OrderSyncError("Client not initialized. Use 'async with OrderSyncClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def fetch_orders(self) -> list[Order]:
        """Fetch every order visible to the session's user."""
        return await _orders_api.fetch_orders(self._require_transport())

    async def update_order_status(self, order_id: int, status: OrderStatus | str) -> dict[str, Any]:
        """Change one order's status server-side."""
        return await _orders_api.update_order_status(self._require_transport(), order_id, status)

    async def assign_tracking(self, order_id: int, assignment: TrackingAssignment) -> dict[str, Any]:
        """Assign a tracking number to one order."""
        return await _orders_api.assign_tracking(self._require_transport(), order_id, assignment)
