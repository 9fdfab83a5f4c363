"""User-initiated order mutations."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from ordersync.backend import Backend
from ordersync.exceptions import MutationRejectedError
from ordersync.models.notification import OrderStatusChange
from ordersync.models.order import OrderStatus
from ordersync.models.requests import TrackingAssignment
from ordersync.notifications.dispatcher import NotificationDispatcher
from ordersync.session import Session
from ordersync.state.store import SyncStore

_logger = logging.getLogger(__name__)


class StatusMutationCoordinator:
    """Apply staff-initiated status and tracking changes.

    Mutations are pessimistic: the cached snapshot changes only after the
    backend confirmed the update, so a failure needs no rollback.

    Parameters
    ----------
    backend : Backend
        Order backend.
    store : SyncStore
        Store patched after a confirmed status change.
    dispatcher : NotificationDispatcher
        Receives the status change announcement.
    session : Session
        Session whose role gates mutations.
    resync : callable, optional
        Called after a tracking assignment so derived fields (carrier,
        estimated delivery) come back through a full refresh. The monitor
        wires ``Scheduler.trigger_immediate`` here.
    """

    def __init__(
        self,
        backend: Backend,
        store: SyncStore,
        dispatcher: NotificationDispatcher,
        session: Session,
        *,
        resync: Callable[[], Awaitable[Any] | None] | None = None,
    ) -> None:
        self._backend = backend
        self._store = store
        self._dispatcher = dispatcher
        self._session = session
        self._resync = resync

    def _require_privileged(self, action: str) -> None:
        if not self._session.is_privileged:
            role = self._session.user.role if self._session.user is not None else None
            raise MutationRejectedError(f"{action} requires a staff role (current role: {role})", status_code=403)

    async def update_status(self, order_id: int, new_status: OrderStatus | str) -> None:
        """Change an order's status, then patch the cache and announce it.

        Raises
        ------
        MutationRejectedError
            The backend refused the change; the snapshot is untouched.
        AuthRejectedError
            The credential is no longer valid.
        """
        self._require_privileged("status update")
        await self._backend.update_order_status(order_id, new_status)

        cached = self._store.get(order_id)
        if not self._store.patch_status(order_id, new_status):
            _logger.debug("Order %s confirmed but not cached; next refresh picks it up", order_id)

        await self._dispatcher.notify_order_status_change(
            OrderStatusChange(
                order_id=order_id,
                status=str(new_status),
                customer_name=cached.receiver_name if cached is not None and cached.receiver_name else None,
                tracking_number=cached.tracking_number if cached is not None else None,
            )
        )

    async def assign_tracking(
        self,
        order_id: int,
        tracking: TrackingAssignment | Mapping[str, Any],
    ) -> dict[str, Any]:
        """Assign a tracking number; the snapshot is refreshed, not patched.

        Raises
        ------
        MutationRejectedError
            The backend refused the assignment or the input is invalid.
        """
        self._require_privileged("tracking assignment")
        if not isinstance(tracking, TrackingAssignment):
            try:
                tracking = TrackingAssignment.model_validate(tracking)
            except ValueError as exc:
                raise MutationRejectedError(f"Invalid tracking assignment: {exc}") from exc

        result = await self._backend.assign_tracking(order_id, tracking)
        if self._resync is not None:
            self._resync()
        return result
