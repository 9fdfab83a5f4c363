from __future__ import annotations

import asyncio
from dataclasses import dataclass

import pytest

from ordersync.scheduler import Scheduler, SchedulerState


@dataclass
class CountingRefresh:
    calls: int = 0
    fail: bool = False
    gate: asyncio.Event | None = None
    finished: int = 0

    async def __call__(self) -> None:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise RuntimeError("backend down")
        self.finished += 1


@pytest.mark.asyncio
async def test_start_is_idempotent() -> None:
    scheduler = Scheduler(CountingRefresh(), interval=10.0)

    scheduler.start()
    timer = scheduler._timer  # noqa: SLF001
    scheduler.start()

    assert scheduler._timer is timer  # noqa: SLF001
    assert scheduler.state == SchedulerState(enabled=True, visible=True, running=True)
    scheduler.stop()
    assert scheduler.state == SchedulerState(enabled=False, visible=True, running=False)


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Scheduler(CountingRefresh(), interval=0)


@pytest.mark.asyncio
async def test_ticks_refresh_at_most_once_per_interval_while_visible() -> None:
    refresh = CountingRefresh()
    scheduler = Scheduler(refresh, interval=0.05)

    scheduler.start()
    await asyncio.sleep(0.18)
    scheduler.stop()
    await scheduler.wait_idle()

    assert 2 <= refresh.calls <= 3


@pytest.mark.asyncio
async def test_no_refresh_while_hidden() -> None:
    refresh = CountingRefresh()
    scheduler = Scheduler(refresh, interval=0.03, visible=False)

    scheduler.start()
    await asyncio.sleep(0.15)

    assert refresh.calls == 0
    assert scheduler.is_running
    scheduler.stop()


@pytest.mark.asyncio
async def test_hidden_for_several_windows_then_visible_refreshes_exactly_once() -> None:
    # 0.2s stands in for the 10s period; hidden for 3.5 periods.
    refresh = CountingRefresh()
    scheduler = Scheduler(refresh, interval=0.2)
    scheduler.start()
    scheduler.set_visible(False)

    await asyncio.sleep(0.7)
    assert refresh.calls == 0

    scheduler.set_visible(True)
    await scheduler.wait_idle()

    assert refresh.calls == 1
    scheduler.stop()


@pytest.mark.asyncio
async def test_visibility_changes_do_nothing_while_disabled() -> None:
    refresh = CountingRefresh()
    scheduler = Scheduler(refresh, interval=10.0, visible=False)

    scheduler.set_visible(True)
    await scheduler.wait_idle()

    assert refresh.calls == 0


@pytest.mark.asyncio
async def test_visible_to_visible_is_not_a_transition() -> None:
    refresh = CountingRefresh()
    scheduler = Scheduler(refresh, interval=10.0)
    scheduler.start()

    scheduler.set_visible(True)
    await scheduler.wait_idle()

    assert refresh.calls == 0
    scheduler.stop()


@pytest.mark.asyncio
async def test_each_hidden_to_visible_transition_refreshes_once() -> None:
    refresh = CountingRefresh()
    scheduler = Scheduler(refresh, interval=10.0)
    scheduler.start()

    for _ in range(3):
        scheduler.set_visible(False)
        scheduler.set_visible(True)
    await scheduler.wait_idle()

    assert refresh.calls == 3
    scheduler.stop()


@pytest.mark.asyncio
async def test_failing_refresh_never_stops_the_timer(caplog: pytest.LogCaptureFixture) -> None:
    refresh = CountingRefresh(fail=True)
    scheduler = Scheduler(refresh, interval=0.03)

    scheduler.start()
    await asyncio.sleep(0.14)

    assert refresh.calls >= 2
    assert scheduler.is_running
    assert "schedule continues" in caplog.text
    scheduler.stop()


@pytest.mark.asyncio
async def test_trigger_immediate_ignores_visibility_and_timer() -> None:
    refresh = CountingRefresh()
    scheduler = Scheduler(refresh, interval=10.0, visible=False)

    await scheduler.trigger_immediate()

    assert refresh.calls == 1
    assert not scheduler.is_running


@pytest.mark.asyncio
async def test_stop_prevents_further_ticks() -> None:
    refresh = CountingRefresh()
    scheduler = Scheduler(refresh, interval=0.03)

    scheduler.start()
    scheduler.stop()
    await asyncio.sleep(0.1)

    assert refresh.calls == 0


@pytest.mark.asyncio
async def test_stop_leaves_in_flight_refresh_running() -> None:
    refresh = CountingRefresh(gate=asyncio.Event())
    scheduler = Scheduler(refresh, interval=10.0)
    scheduler.start()

    task = scheduler.trigger_immediate()
    await asyncio.sleep(0)
    scheduler.stop()
    refresh.gate.set()  # type: ignore[union-attr]
    await task

    assert refresh.finished == 1


@pytest.mark.asyncio
async def test_stop_can_cancel_in_flight_refreshes() -> None:
    refresh = CountingRefresh(gate=asyncio.Event())
    scheduler = Scheduler(refresh, interval=10.0)
    scheduler.start()

    task = scheduler.trigger_immediate()
    await asyncio.sleep(0)
    assert scheduler.in_flight == 1

    scheduler.stop(cancel_in_flight=True)
    await scheduler.wait_idle()

    assert task.cancelled()
    assert refresh.finished == 0
    assert scheduler.in_flight == 0


@pytest.mark.asyncio
async def test_set_enabled_toggles_timer() -> None:
    scheduler = Scheduler(CountingRefresh(), interval=10.0)

    scheduler.set_enabled(True)
    assert scheduler.is_running
    scheduler.set_enabled(False)
    assert not scheduler.is_running
    assert scheduler.state.enabled is False
