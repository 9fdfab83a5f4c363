"""In-app toast queue with per-toast expiry timers."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable

from ordersync._constants import TOAST_TIMEOUT
from ordersync.models.notification import Toast, ToastSeverity

_logger = logging.getLogger(__name__)

# Process-wide, so ids stay unique across queues.
_TOAST_IDS = itertools.count(1)

ToastListener = Callable[[tuple[Toast, ...]], None]


def _next_toast_id() -> str:
    return f"toast-{next(_TOAST_IDS)}"


class ToastQueue:
    """Active toasts in display order.

    A toast with a positive timeout is removed by an event-loop timer; its
    timer is cancelled when the toast is removed first, so expiry never
    removes twice.
    """

    def __init__(self, *, default_timeout: float = TOAST_TIMEOUT) -> None:
        self._default_timeout = default_timeout
        self._toasts: list[Toast] = []
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._listeners: list[ToastListener] = []

    @property
    def toasts(self) -> tuple[Toast, ...]:
        return tuple(self._toasts)

    def __len__(self) -> int:
        return len(self._toasts)

    def __contains__(self, toast_id: object) -> bool:
        return any(toast.id == toast_id for toast in self._toasts)

    def subscribe(self, listener: ToastListener) -> None:
        self._listeners.append(listener)

    def show(
        self,
        severity: ToastSeverity | str,
        title: str,
        message: str,
        *,
        timeout: float | None = None,
    ) -> str:
        """Append a toast and return its id.

        *timeout* defaults to the queue default; ``<= 0`` keeps the toast
        until it is removed explicitly.
        """
        effective = self._default_timeout if timeout is None else timeout
        toast = Toast(
            id=_next_toast_id(),
            severity=ToastSeverity(severity),
            title=title,
            message=message,
            timeout=effective,
        )
        self._toasts.append(toast)
        if effective > 0:
            loop = asyncio.get_running_loop()
            self._timers[toast.id] = loop.call_later(effective, self._expire, toast.id)
        self._emit()
        return toast.id

    def remove(self, toast_id: str) -> bool:
        """Remove a toast; unknown ids are ignored. Returns whether one was removed."""
        handle = self._timers.pop(toast_id, None)
        if handle is not None:
            handle.cancel()
        remaining = [toast for toast in self._toasts if toast.id != toast_id]
        if len(remaining) == len(self._toasts):
            return False
        self._toasts = remaining
        self._emit()
        return True

    def clear(self) -> None:
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        if self._toasts:
            self._toasts = []
            self._emit()

    def _expire(self, toast_id: str) -> None:
        self._timers.pop(toast_id, None)
        if self.remove(toast_id):
            _logger.debug("Toast %s expired", toast_id)

    def _emit(self) -> None:
        toasts = self.toasts
        for listener in list(self._listeners):
            try:
                listener(toasts)
            except Exception:
                _logger.warning("Toast listener failed", exc_info=True)
