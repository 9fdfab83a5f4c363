"""OS notification permission negotiation and the staff permission banner."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from ordersync._constants import BANNER_DELAY
from ordersync.models.notification import PermissionState
from ordersync.notifications.platform import NotificationPlatform
from ordersync.session import Session

_logger = logging.getLogger(__name__)


def _merge_permission(current: PermissionState, result: PermissionState) -> PermissionState:
    # The platform answer is authoritative; an undecided answer never
    # replaces a decided state.
    if result is PermissionState.DEFAULT:
        return current
    return result


class PermissionNegotiator:
    """Owns the process-wide OS notification permission state."""

    def __init__(self, platform: NotificationPlatform) -> None:
        self._platform = platform
        if platform.supported:
            self._state = platform.permission()
        else:
            self._state = PermissionState.DENIED
        self._listeners: list[Callable[[PermissionState], None]] = []

    @property
    def state(self) -> PermissionState:
        return self._state

    @property
    def supported(self) -> bool:
        return self._platform.supported

    def subscribe(self, listener: Callable[[PermissionState], None]) -> None:
        self._listeners.append(listener)

    async def request_permission(self) -> PermissionState:
        """Prompt once and record the answer.

        Failures and unsupported platforms leave the user with toast-only
        delivery; nothing is raised.
        """
        if not self._platform.supported:
            self._set(PermissionState.DENIED)
            return self._state
        try:
            result = await self._platform.request_permission()
        except Exception:
            _logger.warning("Notification permission prompt failed", exc_info=True)
            return self._state
        self._set(_merge_permission(self._state, PermissionState(result)))
        return self._state

    def _set(self, state: PermissionState) -> None:
        if state is self._state:
            return
        _logger.debug("Notification permission %s -> %s", self._state, state)
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                _logger.warning("Permission listener failed", exc_info=True)


class PermissionBanner:
    """Decides when to offer staff the notification permission prompt.

    The banner is due only for privileged users, while permission is still
    undecided, once *delay* seconds have passed since authentication, and
    until it is dismissed. Dismissal lasts for this process only.
    """

    def __init__(
        self,
        negotiator: PermissionNegotiator,
        session: Session,
        *,
        delay: float = BANNER_DELAY,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._negotiator = negotiator
        self._session = session
        self._delay = delay
        self._clock = clock
        self._authenticated_at: float = session.authenticated_at
        self._dismissed = False

    def mark_authenticated(self) -> None:
        """Restart the delay, e.g. after a fresh sign-in."""
        self._authenticated_at = self._clock()
        self._dismissed = False

    @property
    def dismissed(self) -> bool:
        return self._dismissed

    @property
    def remaining(self) -> float:
        """Seconds left before the banner may show."""
        return max(0.0, self._delay - (self._clock() - self._authenticated_at))

    @property
    def should_show(self) -> bool:
        if self._dismissed or not self._session.is_privileged:
            return False
        if self._negotiator.state is not PermissionState.DEFAULT:
            return False
        return self.remaining <= 0

    async def arm(self) -> bool:
        """Wait out the delay, then report whether the banner is due."""
        remaining = self.remaining
        while remaining > 0:
            await asyncio.sleep(remaining)
            remaining = self.remaining
        return self.should_show

    def dismiss(self) -> None:
        self._dismissed = True

    async def request(self) -> PermissionState:
        return await self._negotiator.request_permission()

    @property
    def headline(self) -> str:
        if self._negotiator.state is PermissionState.DENIED:
            return "알림이 차단되어 있습니다"
        return "알림 권한 요청"

    @property
    def message(self) -> str:
        if self._negotiator.state is PermissionState.DENIED:
            return "브라우저 설정에서 이 사이트의 알림을 허용해주세요. 주문 상태 변경 시 실시간으로 알림을 받을 수 있습니다."
        return "주문 상태 변경, 새 주문 접수 등 중요한 알림을 실시간으로 받으시겠습니까?"
