"""Backend collaborator interface."""

from __future__ import annotations

from typing import Any, Protocol

from ordersync.models.order import Order, OrderStatus
from ordersync.models.requests import TrackingAssignment


class Backend(Protocol):
    """What the sync core needs from the order backend.

    :class:`~ordersync.client.OrderSyncClient` is the HTTP implementation.
    Failures are reported as :class:`~ordersync.exceptions.TransientFetchError`
    (list), :class:`~ordersync.exceptions.MutationRejectedError` (updates) or
    :class:`~ordersync.exceptions.AuthRejectedError` (any call).
    """

    async def fetch_orders(self) -> list[Order]:
        ...

    async def update_order_status(self, order_id: int, status: OrderStatus | str) -> dict[str, Any]:
        ...

    async def assign_tracking(self, order_id: int, assignment: TrackingAssignment) -> dict[str, Any]:
        ...
