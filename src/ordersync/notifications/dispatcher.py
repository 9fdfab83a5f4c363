"""Turn order events into toasts and OS notifications."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ordersync.config import SyncConfig
from ordersync.exceptions import PermissionUnavailableError
from ordersync.models.notification import (
    NewOrderInfo,
    NotificationOptions,
    OrderStatusChange,
    PermissionState,
    Toast,
    ToastSeverity,
)
from ordersync.models.order import OrderStatus
from ordersync.notifications.permission import PermissionNegotiator
from ordersync.notifications.platform import NotificationPlatform
from ordersync.notifications.toasts import ToastListener, ToastQueue

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StatusPresentation:
    title: str
    emoji: str
    severity: ToastSeverity


def status_presentation(status: OrderStatus | str) -> StatusPresentation:
    """Title, emoji and severity used to announce a status; never raises."""
    match OrderStatus(status):
        case OrderStatus.RECEIVED:
            return StatusPresentation("주문 접수 완료", "📦", ToastSeverity.INFO)
        case OrderStatus.PREPARING:
            return StatusPresentation("배송 준비 중", "📋", ToastSeverity.INFO)
        case OrderStatus.IN_TRANSIT:
            return StatusPresentation("배송 시작", "🚚", ToastSeverity.INFO)
        case OrderStatus.DELIVERED:
            return StatusPresentation("배송 완료", "✅", ToastSeverity.SUCCESS)
        case OrderStatus.CANCELLED:
            return StatusPresentation("주문 취소", "❌", ToastSeverity.WARNING)
        case OrderStatus.RETURNED:
            return StatusPresentation("주문 반송", "↩️", ToastSeverity.ERROR)
        case _:
            return StatusPresentation("상태 변경", "📋", ToastSeverity.INFO)


class NotificationDispatcher:
    """Owns the toast queue and bridges to OS notifications.

    OS delivery depends on the negotiated permission: granted delivers,
    default prompts once and retries once, denied does nothing. Whatever
    happens on the OS side, the toast channel still works.
    """

    def __init__(
        self,
        negotiator: PermissionNegotiator,
        platform: NotificationPlatform,
        *,
        config: SyncConfig | None = None,
        toasts: ToastQueue | None = None,
    ) -> None:
        self._config = config or SyncConfig()
        self._negotiator = negotiator
        self._platform = platform
        self._toasts = toasts or ToastQueue(default_timeout=self._config.toast_timeout)
        self._close_timers: set[asyncio.TimerHandle] = set()

    # ------------------------------------------------------------------
    # Toasts
    # ------------------------------------------------------------------

    @property
    def toasts(self) -> tuple[Toast, ...]:
        return self._toasts.toasts

    @property
    def toast_queue(self) -> ToastQueue:
        return self._toasts

    def show_toast(
        self,
        severity: ToastSeverity | str,
        title: str,
        message: str,
        *,
        timeout: float | None = None,
    ) -> str:
        return self._toasts.show(severity, title, message, timeout=timeout)

    def remove_toast(self, toast_id: str) -> None:
        self._toasts.remove(toast_id)

    def clear_toasts(self) -> None:
        self._toasts.clear()

    def subscribe(self, listener: ToastListener) -> None:
        """Call *listener* with the visible toasts after every queue change."""
        self._toasts.subscribe(listener)

    # ------------------------------------------------------------------
    # OS notifications
    # ------------------------------------------------------------------

    @property
    def permission(self) -> PermissionState:
        return self._negotiator.state

    async def request_permission(self) -> PermissionState:
        return await self._negotiator.request_permission()

    async def show_os_notification(self, options: NotificationOptions) -> Any | None:
        """Deliver an OS notification if permission allows; returns the handle or ``None``."""
        state = self._negotiator.state
        if state is PermissionState.GRANTED:
            return self._deliver(options)
        if state is PermissionState.DEFAULT:
            if await self._negotiator.request_permission() is PermissionState.GRANTED:
                return self._deliver(options)
        _logger.debug("OS notification suppressed (permission=%s): %s", self._negotiator.state, options.title)
        return None

    def _deliver(self, options: NotificationOptions) -> Any | None:
        if options.icon is None:
            options = options.model_copy(update={"icon": self._config.default_icon})
        try:
            handle = self._platform.show(options)
        except PermissionUnavailableError:
            _logger.debug("Platform refused notification; toast only", exc_info=True)
            return None
        except Exception:
            _logger.warning("OS notification delivery failed; toast only", exc_info=True)
            return None
        if options.timeout is not None and options.timeout > 0:
            loop = asyncio.get_running_loop()
            timer: asyncio.TimerHandle

            def _auto_close() -> None:
                self._close_timers.discard(timer)
                self._close(handle)

            timer = loop.call_later(options.timeout, _auto_close)
            self._close_timers.add(timer)
        return handle

    def _close(self, handle: Any) -> None:
        try:
            self._platform.close(handle)
        except Exception:
            _logger.debug("Closing OS notification failed", exc_info=True)

    # ------------------------------------------------------------------
    # Order events
    # ------------------------------------------------------------------

    async def notify_order_status_change(self, change: OrderStatusChange | Mapping[str, Any]) -> str:
        """Announce a status change on both channels; returns the toast id."""
        if not isinstance(change, OrderStatusChange):
            change = OrderStatusChange.model_validate(change)
        presentation = status_presentation(change.status)

        if change.tracking_number:
            detail = f"운송장: {change.tracking_number}"
        else:
            detail = f"주문번호: {change.order_id}"
        customer = change.customer_name or "고객"

        await self.show_os_notification(
            NotificationOptions(
                title=f"{presentation.emoji} {presentation.title}",
                body=f"{customer}님의 주문이 {change.status} 상태로 변경되었습니다.\n{detail}",
                tag=f"order-{change.order_id}",
                require_interaction=change.parsed_status is OrderStatus.DELIVERED,
                timeout=self._config.os_notification_timeout,
            )
        )
        return self.show_toast(
            presentation.severity,
            presentation.title,
            f"주문 #{change.order_id}이 {change.status} 상태로 변경되었습니다.",
            timeout=self._config.status_toast_timeout,
        )

    async def notify_new_order(self, info: NewOrderInfo | Mapping[str, Any]) -> str:
        """Announce a newly received order to staff; returns the toast id."""
        if not isinstance(info, NewOrderInfo):
            info = NewOrderInfo.model_validate(info)
        await self.show_os_notification(
            NotificationOptions(
                title="🆕 새 주문 접수",
                body=f"{info.customer_name}님이 새 주문을 등록했습니다.\n주문번호: {info.order_id}",
                tag=f"new-order-{info.order_id}",
                require_interaction=True,
            )
        )
        return self.show_toast(
            ToastSeverity.INFO,
            "새 주문 접수",
            f"{info.customer_name}님의 주문 #{info.order_id}이 접수되었습니다.",
            timeout=self._config.new_order_toast_timeout,
        )

    def close(self) -> None:
        """Cancel pending auto-close timers and drop every toast."""
        for timer in list(self._close_timers):
            timer.cancel()
        self._close_timers.clear()
        self._toasts.clear()
