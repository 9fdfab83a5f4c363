"""Visibility-aware polling scheduler."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ordersync._constants import POLL_INTERVAL

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SchedulerState:
    """Point-in-time view of the scheduler.

    ``running`` is true while the single timer task exists.
    """

    enabled: bool
    visible: bool
    running: bool


class Scheduler:
    """Drive periodic refreshes while the consumer is watching.

    A single timer task wakes every *interval* seconds. Each wake-up checks
    visibility first and does nothing while hidden. Refreshes run as their
    own tasks and are not serialized against each other; a failing refresh
    is logged and never stops the timer.

    Usage::

        scheduler = Scheduler(store.refresh, interval=10.0)
        scheduler.start()
        scheduler.set_visible(False)   # ticks become no-ops
        scheduler.set_visible(True)    # one immediate refresh
        await scheduler.trigger_immediate()
        scheduler.stop()
    """

    def __init__(
        self,
        refresh: Callable[[], Awaitable[Any]],
        *,
        interval: float = POLL_INTERVAL,
        visible: bool = True,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._refresh = refresh
        self._interval = interval
        self._enabled = False
        self._visible = visible
        self._timer: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def in_flight(self) -> int:
        """Number of refreshes started by this scheduler that have not finished."""
        return len(self._in_flight)

    @property
    def state(self) -> SchedulerState:
        return SchedulerState(enabled=self._enabled, visible=self._visible, running=self.is_running)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the repeating timer; no-op if it is already running."""
        self._enabled = True
        if self.is_running:
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.create_task(self._run(), name="ordersync-poll-timer")
        _logger.debug("Polling started (every %.1fs)", self._interval)

    def stop(self, *, cancel_in_flight: bool = False) -> None:
        """Cancel the timer.

        Refreshes already in flight keep running unless *cancel_in_flight*
        is set.
        """
        self._enabled = False
        timer = self._timer
        self._timer = None
        if timer is not None:
            timer.cancel()
            _logger.debug("Polling stopped")
        if cancel_in_flight:
            for task in list(self._in_flight):
                task.cancel()

    def set_enabled(self, enabled: bool) -> None:
        """Toggle automatic refresh."""
        if enabled:
            self.start()
        else:
            self.stop()

    def set_visible(self, is_visible: bool) -> None:
        """Record consumer visibility.

        Becoming visible while enabled fires one immediate refresh; the
        periodic cadence keeps its phase. Becoming hidden leaves the timer
        alone, ticks simply skip their work.
        """
        was_visible = self._visible
        self._visible = is_visible
        if is_visible and not was_visible and self._enabled:
            _logger.debug("Became visible, refreshing immediately")
            self._spawn("visible")

    def trigger_immediate(self) -> asyncio.Task[None]:
        """Refresh now, regardless of visibility or timer phase.

        Returns the refresh task so callers can await completion.
        """
        return self._spawn("manual")

    async def wait_idle(self) -> None:
        """Wait until every refresh started so far has finished."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self._tick()
            except Exception:
                _logger.exception("Polling tick failed")

    def _tick(self) -> None:
        if not self._visible:
            _logger.debug("Tick skipped while hidden")
            return
        self._spawn("tick")

    def _spawn(self, reason: str) -> asyncio.Task[None]:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._guarded_refresh(reason), name=f"ordersync-refresh-{reason}")
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def _guarded_refresh(self, reason: str) -> None:
        try:
            await self._refresh()
        except asyncio.CancelledError:
            _logger.debug("Refresh (%s) cancelled", reason)
            raise
        except Exception:
            _logger.exception("Refresh (%s) failed; schedule continues", reason)
