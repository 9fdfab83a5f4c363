"""Shipping order endpoints.

Endpoint functions take a :class:`~ordersync._transport.Transport` and
return parsed models. They map backend failures on mutating endpoints to
:class:`MutationRejectedError`; authentication failures keep their own
type so the session collaborator can react to them.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ordersync._constants import ORDERS_ENDPOINT, order_status_endpoint, order_tracking_endpoint
from ordersync._transport import Transport
from ordersync.exceptions import (
    AuthRejectedError,
    BackendError,
    MutationRejectedError,
    TransientFetchError,
    TransportError,
)
from ordersync.models.order import Order, OrderStatus
from ordersync.models.requests import StatusUpdate, TrackingAssignment

_logger = logging.getLogger(__name__)


def _parse_orders(endpoint: str, decoded: Any) -> list[Order]:
    if isinstance(decoded, dict):
        items = decoded.get("orders", [])
    elif isinstance(decoded, list):
        items = decoded
    else:
        items = None
    if not isinstance(items, list):
        raise TransientFetchError(f"Unexpected order list payload from {endpoint}", endpoint=endpoint)

    orders: list[Order] = []
    for item in items:
        try:
            orders.append(Order.model_validate(item))
        except ValidationError as exc:
            raise TransientFetchError(
                f"Malformed order in {endpoint}: {exc.errors()[0].get('msg', exc)}",
                endpoint=endpoint,
            ) from exc
    return orders


async def fetch_orders(transport: Transport) -> list[Order]:
    """Fetch the full current order list."""
    endpoint = ORDERS_ENDPOINT
    try:
        decoded = await transport.request("GET", endpoint)
    except AuthRejectedError:
        raise
    except (BackendError, TransportError) as exc:
        raise TransientFetchError(str(exc), status_code=exc.status_code, endpoint=endpoint) from exc
    return _parse_orders(endpoint, decoded)


async def update_order_status(transport: Transport, order_id: int, status: OrderStatus | str) -> dict[str, Any]:
    """Set the status of one order server-side."""
    endpoint = order_status_endpoint(order_id)
    try:
        body = StatusUpdate(status=OrderStatus(status))
    except ValidationError as exc:
        raise MutationRejectedError(f"Unknown order status {status!r}", endpoint=endpoint) from exc

    try:
        decoded = await transport.request("PATCH", endpoint, body.to_payload())
    except AuthRejectedError:
        raise
    except (BackendError, TransportError) as exc:
        raise MutationRejectedError(
            str(exc),
            status_code=exc.status_code,
            endpoint=endpoint,
        ) from exc
    _logger.debug("Order %s status set to %s", order_id, body.status.value)
    return decoded if isinstance(decoded, dict) else {}


async def assign_tracking(transport: Transport, order_id: int, assignment: TrackingAssignment) -> dict[str, Any]:
    """Attach a tracking number (and optional carrier / ETA) to one order."""
    endpoint = order_tracking_endpoint(order_id)
    try:
        decoded = await transport.request("POST", endpoint, assignment.to_payload())
    except AuthRejectedError:
        raise
    except (BackendError, TransportError) as exc:
        raise MutationRejectedError(
            str(exc),
            status_code=exc.status_code,
            endpoint=endpoint,
        ) from exc
    _logger.debug("Order %s tracking assigned", order_id)
    return decoded if isinstance(decoded, dict) else {}
