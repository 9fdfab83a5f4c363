"""Immutable order snapshot with derived per-status counts."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import datetime
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr

from ordersync.models.order import Order, OrderStatus


def count_statuses(orders: Iterable[Order]) -> dict[OrderStatus, int]:
    """Count orders per status; every status is present, zero or not."""
    counter = Counter(order.status for order in orders)
    return {status: counter.get(status, 0) for status in OrderStatus}


class Snapshot(BaseModel):
    """Orders plus the counts derived from exactly those orders.

    ``counts`` is derived from ``orders`` when the snapshot is created and
    is exposed read-only, so the two can never disagree.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    orders: tuple[Order, ...] = ()
    refreshed_at: datetime | None = None

    _counts: dict[OrderStatus, int] = PrivateAttr(default_factory=dict)

    def model_post_init(self, context: Any) -> None:
        self._counts = count_statuses(self.orders)

    @classmethod
    def build(cls, orders: Iterable[Order], *, refreshed_at: datetime | None = None) -> Snapshot:
        return cls(orders=tuple(orders), refreshed_at=refreshed_at)

    @property
    def counts(self) -> Mapping[OrderStatus, int]:
        """Orders per status; every status is present."""
        return MappingProxyType(self._counts)

    @property
    def total(self) -> int:
        return len(self.orders)

    def get(self, order_id: int) -> Order | None:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None

    def replace_order(self, updated: Order) -> Snapshot | None:
        """Return a new snapshot with one order swapped, or ``None`` if absent."""
        replaced = False
        orders: list[Order] = []
        for order in self.orders:
            if order.id == updated.id and not replaced:
                orders.append(updated)
                replaced = True
            else:
                orders.append(order)
        if not replaced:
            return None
        return Snapshot.build(orders, refreshed_at=self.refreshed_at)

    def filter(self, *, search: str = "", status: OrderStatus | str | None = None) -> list[Order]:
        """Orders matching a free-text search and an optional status."""
        wanted = OrderStatus(status) if status is not None else None
        return [
            order
            for order in self.orders
            if order.matches(search) and (wanted is None or order.status == wanted)
        ]
