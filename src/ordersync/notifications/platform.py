"""OS notification platform collaborator."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol

from ordersync.exceptions import PermissionUnavailableError
from ordersync.models.notification import NotificationOptions, PermissionState

_logger = logging.getLogger(__name__)


class NotificationPlatform(Protocol):
    """Tri-state permission probe/prompt plus a display primitive.

    ``show`` returns an opaque handle that ``close`` accepts.
    """

    @property
    def supported(self) -> bool:
        ...

    def permission(self) -> PermissionState:
        ...

    async def request_permission(self) -> PermissionState:
        ...

    def show(self, options: NotificationOptions) -> Any:
        ...

    def close(self, handle: Any) -> None:
        ...


@dataclass(slots=True)
class DeliveredNotification:
    """A notification handed to :class:`HeadlessNotificationPlatform`."""

    id: int
    options: NotificationOptions
    delivered_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    closed: bool = False


class HeadlessNotificationPlatform:
    """In-process platform for servers, scripts and tests.

    Deliveries are logged and kept in :attr:`delivered`. A notification whose
    tag matches a still-open one replaces it, the way desktop platforms
    coalesce tagged notifications.

    Parameters
    ----------
    permission : PermissionState
        Permission reported before any prompt.
    prompt_answer : PermissionState
        What the simulated user answers when prompted from ``default``.
    supported : bool
        Whether notifications exist at all on this platform.
    """

    def __init__(
        self,
        *,
        permission: PermissionState = PermissionState.DEFAULT,
        prompt_answer: PermissionState = PermissionState.GRANTED,
        supported: bool = True,
    ) -> None:
        self._permission = permission
        self._prompt_answer = prompt_answer
        self._supported = supported
        self._ids = itertools.count(1)
        self.prompts = 0
        self.delivered: list[DeliveredNotification] = []

    @property
    def supported(self) -> bool:
        return self._supported

    @property
    def active(self) -> list[DeliveredNotification]:
        return [item for item in self.delivered if not item.closed]

    def permission(self) -> PermissionState:
        return self._permission

    async def request_permission(self) -> PermissionState:
        self.prompts += 1
        if self._permission is PermissionState.DEFAULT:
            self._permission = self._prompt_answer
        return self._permission

    def show(self, options: NotificationOptions) -> DeliveredNotification:
        if not self._supported or self._permission is not PermissionState.GRANTED:
            raise PermissionUnavailableError(f"notification permission is {self._permission}")
        if options.tag:
            for item in self.active:
                if item.options.tag == options.tag:
                    item.closed = True
        delivered = DeliveredNotification(id=next(self._ids), options=options)
        self.delivered.append(delivered)
        _logger.info("Notification [%s] %s: %s", options.tag or "-", options.title, options.body)
        return delivered

    def close(self, handle: Any) -> None:
        if isinstance(handle, DeliveredNotification):
            handle.closed = True
