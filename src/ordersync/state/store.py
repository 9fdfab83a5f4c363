"""Authoritative in-memory order snapshot.

This is the only component allowed to replace or patch the cached orders.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime

from ordersync.backend import Backend
from ordersync.exceptions import AuthRejectedError, OrderSyncError
from ordersync.models.order import Order, OrderStatus
from ordersync.models.snapshot import Snapshot
from ordersync.state.policy import should_apply_refresh

_logger = logging.getLogger(__name__)

SnapshotListener = Callable[[Snapshot], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SyncStore:
    """Holds the current :class:`Snapshot` and keeps it in sync with the backend.

    The snapshot is immutable and replaced with a single assignment, so a
    reader sees either the old orders with the old counts or the new orders
    with the new counts, never a mix.
    """

    def __init__(
        self,
        backend: Backend,
        *,
        strict_ordering: bool = True,
        on_auth_rejected: Callable[[AuthRejectedError], None] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._backend = backend
        self._strict_ordering = strict_ordering
        self._on_auth_rejected = on_auth_rejected
        self._clock = clock
        self._snapshot = Snapshot()
        self._issued_sequence = 0
        self._applied_sequence = 0
        self._in_flight = 0
        self._listeners: list[SnapshotListener] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def orders(self) -> tuple[Order, ...]:
        return self._snapshot.orders

    @property
    def counts(self) -> Mapping[OrderStatus, int]:
        return self._snapshot.counts

    @property
    def last_updated(self) -> datetime | None:
        return self._snapshot.refreshed_at

    @property
    def is_refreshing(self) -> bool:
        return self._in_flight > 0

    def get(self, order_id: int) -> Order | None:
        return self._snapshot.get(order_id)

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call *listener* after every applied change; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    async def refresh(self) -> bool:
        """Fetch the full order list and replace the snapshot.

        Returns ``True`` when the new snapshot was applied. On failure the
        previous snapshot is kept, the error is logged and ``False`` is
        returned; nothing is raised except task cancellation.
        """
        self._issued_sequence += 1
        sequence = self._issued_sequence
        self._in_flight += 1
        try:
            orders = await self._backend.fetch_orders()
        except AuthRejectedError as exc:
            _logger.warning("Order refresh rejected by backend: %s", exc)
            if self._on_auth_rejected is not None:
                try:
                    self._on_auth_rejected(exc)
                except Exception:
                    _logger.warning("on_auth_rejected callback failed", exc_info=True)
            return False
        except OrderSyncError as exc:
            _logger.warning("Order refresh failed, keeping previous snapshot: %s", exc)
            return False
        except asyncio.CancelledError:
            _logger.debug("Order refresh #%d cancelled", sequence)
            raise
        except Exception:
            _logger.exception("Unexpected error during order refresh, keeping previous snapshot")
            return False
        finally:
            self._in_flight -= 1

        if not should_apply_refresh(
            sequence=sequence,
            applied_sequence=self._applied_sequence,
            strict=self._strict_ordering,
        ):
            _logger.debug(
                "Discarding stale refresh #%d (last applied #%d)",
                sequence,
                self._applied_sequence,
            )
            return False

        self._snapshot = Snapshot.build(orders, refreshed_at=self._clock())
        self._applied_sequence = max(self._applied_sequence, sequence)
        _logger.debug("Applied refresh #%d with %d orders", sequence, self._snapshot.total)
        self._emit()
        return True

    def patch_status(self, order_id: int, new_status: OrderStatus | str) -> bool:
        """Set one cached order's status after the backend confirmed it.

        Recomputes counts and leaves every other order untouched. Returns
        ``False`` when the order is not in the current snapshot.
        """
        current = self._snapshot.get(order_id)
        if current is None:
            _logger.debug("patch_status: order %s not in snapshot", order_id)
            return False
        return self.patch_order(current.with_status(new_status))

    def patch_order(self, order: Order) -> bool:
        """Replace one cached order wholesale."""
        updated = self._snapshot.replace_order(order)
        if updated is None:
            return False
        self._snapshot = updated
        if self._strict_ordering:
            # Refreshes issued before this confirmed change may carry stale data.
            self._applied_sequence = self._issued_sequence
        self._emit()
        return True

    def _emit(self) -> None:
        snapshot = self._snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.warning("Snapshot listener failed", exc_info=True)
