"""Composition root wiring the sync core together."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ordersync.backend import Backend
from ordersync.client import OrderSyncClient
from ordersync.config import SyncConfig
from ordersync.coordinator import StatusMutationCoordinator
from ordersync.exceptions import AuthRejectedError
from ordersync.notifications.dispatcher import NotificationDispatcher
from ordersync.notifications.permission import PermissionBanner, PermissionNegotiator
from ordersync.notifications.platform import HeadlessNotificationPlatform, NotificationPlatform
from ordersync.scheduler import Scheduler
from ordersync.session import Session
from ordersync.state.store import SyncStore

_logger = logging.getLogger(__name__)


class OrderMonitor:
    """Own every component and their lifecycles.

    Usage::

        async with OrderMonitor(config, session) as monitor:
            monitor.scheduler.set_visible(False)
            await monitor.coordinator.update_status(42, OrderStatus.DELIVERED)

    The session is re-bound to ``config.privileged_roles`` (sharing its
    credential store), so the configured roles gate mutations and the
    permission banner.

    On enter the initial snapshot is loaded. Polling starts and the
    permission banner is armed only if the session is still authenticated
    afterwards; a rejected credential is never polled with. On exit polling
    stops (in-flight refreshes are cancelled), pending notification timers
    are dropped and the HTTP client is closed if this monitor created it.
    """

    def __init__(
        self,
        config: SyncConfig,
        session: Session,
        *,
        backend: Backend | None = None,
        platform: NotificationPlatform | None = None,
    ) -> None:
        self.config = config
        session = session.with_privileged_roles(config.privileged_roles)
        self.session = session
        self._owned_client: OrderSyncClient | None = None
        if backend is None:
            self._owned_client = OrderSyncClient(config, session)
            backend = self._owned_client
        self.backend: Backend = backend
        self.platform: NotificationPlatform = platform or HeadlessNotificationPlatform()

        self.store = SyncStore(
            backend,
            strict_ordering=config.strict_ordering,
            on_auth_rejected=self._on_auth_rejected,
        )
        self.negotiator = PermissionNegotiator(self.platform)
        self.banner = PermissionBanner(self.negotiator, session, delay=config.banner_delay)
        self.dispatcher = NotificationDispatcher(self.negotiator, self.platform, config=config)
        self.scheduler = Scheduler(self.store.refresh, interval=config.poll_interval)
        self.coordinator = StatusMutationCoordinator(
            backend,
            self.store,
            self.dispatcher,
            session,
            resync=self.scheduler.trigger_immediate,
        )
        self._banner_task: asyncio.Task[bool] | None = None

    async def __aenter__(self) -> OrderMonitor:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    async def start(self) -> None:
        if self._owned_client is not None:
            await self._owned_client.open()
        await self.store.refresh()
        if not self.session.is_authenticated:
            _logger.warning("Session is not authenticated after the initial load; polling not started")
            return
        self.scheduler.start()
        self._banner_task = asyncio.get_running_loop().create_task(
            self._arm_banner(),
            name="ordersync-permission-banner",
        )

    async def stop(self) -> None:
        self.scheduler.stop(cancel_in_flight=True)
        await self.scheduler.wait_idle()
        if self._banner_task is not None:
            self._banner_task.cancel()
            self._banner_task = None
        self.dispatcher.close()
        if self._owned_client is not None:
            await self._owned_client.close()

    async def _arm_banner(self) -> bool:
        due = await self.banner.arm()
        if due and self.session.user is not None:
            _logger.info("Notification permission banner is due for %s", self.session.user.username)
        return due

    def _on_auth_rejected(self, exc: AuthRejectedError) -> None:
        self.session.invalidate()
        self.scheduler.stop()
