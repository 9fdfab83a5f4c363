from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from ordersync.coordinator import StatusMutationCoordinator
from ordersync.exceptions import AuthRejectedError, MutationRejectedError
from ordersync.models.notification import PermissionState, ToastSeverity
from ordersync.models.order import Order, OrderStatus
from ordersync.models.requests import TrackingAssignment
from ordersync.notifications.dispatcher import NotificationDispatcher
from ordersync.notifications.permission import PermissionNegotiator
from ordersync.notifications.platform import HeadlessNotificationPlatform
from ordersync.session import MemoryCredentialStore, Session, User
from ordersync.state.store import SyncStore


@dataclass
class RecordingBackend:
    orders: list[Order] = field(default_factory=list)
    fail_with: Exception | None = None
    status_calls: list[tuple[int, str]] = field(default_factory=list)
    tracking_calls: list[tuple[int, TrackingAssignment]] = field(default_factory=list)
    fetches: int = 0

    async def fetch_orders(self) -> list[Order]:
        self.fetches += 1
        return list(self.orders)

    async def update_order_status(self, order_id: int, status: OrderStatus | str) -> dict[str, Any]:
        if self.fail_with is not None:
            raise self.fail_with
        self.status_calls.append((order_id, str(status)))
        return {"success": True}

    async def assign_tracking(self, order_id: int, assignment: TrackingAssignment) -> dict[str, Any]:
        if self.fail_with is not None:
            raise self.fail_with
        self.tracking_calls.append((order_id, assignment))
        return {"success": True}


@dataclass
class Harness:
    backend: RecordingBackend
    store: SyncStore
    dispatcher: NotificationDispatcher
    platform: HeadlessNotificationPlatform
    resyncs: list[None]


async def _harness(
    role: str = "admin", fail_with: Exception | None = None
) -> tuple[Harness, StatusMutationCoordinator]:
    backend = RecordingBackend(
        orders=[
            Order.model_validate(
                {"id": 1, "status": "배송중", "receiver_name": "김철수", "tracking_number": "1234567890"}
            ),
            Order.model_validate({"id": 2, "status": "배송준비", "receiver_name": "이영희"}),
        ],
        fail_with=fail_with,
    )
    store = SyncStore(backend)
    await store.refresh()
    platform = HeadlessNotificationPlatform(permission=PermissionState.GRANTED)
    dispatcher = NotificationDispatcher(PermissionNegotiator(platform), platform)
    session = Session(
        user=User(id=1, username="u", role=role),
        credentials=MemoryCredentialStore("tok"),
    )
    resyncs: list[None] = []
    coordinator = StatusMutationCoordinator(
        backend,
        store,
        dispatcher,
        session,
        resync=lambda: resyncs.append(None),
    )
    return Harness(backend, store, dispatcher, platform, resyncs), coordinator


@pytest.mark.asyncio
async def test_confirmed_update_patches_snapshot_without_refresh() -> None:
    harness, coordinator = await _harness()
    fetches_before = harness.backend.fetches
    other_before = harness.store.get(2)

    await coordinator.update_status(1, OrderStatus.DELIVERED)

    assert harness.backend.status_calls == [(1, "배송완료")]
    assert harness.backend.fetches == fetches_before
    assert harness.store.get(1).status is OrderStatus.DELIVERED  # type: ignore[union-attr]
    assert harness.store.get(2) is other_before
    assert harness.store.counts[OrderStatus.DELIVERED] == 1
    assert harness.store.counts[OrderStatus.IN_TRANSIT] == 0

    [delivered] = harness.platform.delivered
    assert delivered.options.body.startswith("김철수님의 주문이 배송완료")
    assert delivered.options.body.endswith("운송장: 1234567890")
    assert harness.dispatcher.toasts[0].severity is ToastSeverity.SUCCESS
    harness.dispatcher.close()


@pytest.mark.asyncio
async def test_rejected_update_leaves_snapshot_untouched() -> None:
    error = MutationRejectedError("invalid transition", status_code=400)
    harness, coordinator = await _harness(fail_with=error)
    before = harness.store.snapshot

    with pytest.raises(MutationRejectedError, match="invalid transition"):
        await coordinator.update_status(1, OrderStatus.DELIVERED)

    assert harness.store.snapshot is before
    assert harness.platform.delivered == []
    assert harness.dispatcher.toasts == ()


@pytest.mark.asyncio
async def test_auth_rejection_propagates_from_update() -> None:
    harness, coordinator = await _harness(fail_with=AuthRejectedError("HTTP 401", status_code=401))

    with pytest.raises(AuthRejectedError):
        await coordinator.update_status(1, OrderStatus.DELIVERED)

    assert harness.store.get(1).status is OrderStatus.IN_TRANSIT  # type: ignore[union-attr]


@pytest.mark.asyncio
async def test_non_staff_cannot_mutate() -> None:
    harness, coordinator = await _harness(role="customer")

    with pytest.raises(MutationRejectedError) as excinfo:
        await coordinator.update_status(1, OrderStatus.DELIVERED)
    assert excinfo.value.status_code == 403

    with pytest.raises(MutationRejectedError):
        await coordinator.assign_tracking(1, {"tracking_number": "T-1"})

    assert harness.backend.status_calls == []
    assert harness.backend.tracking_calls == []


@pytest.mark.asyncio
async def test_update_of_uncached_order_still_notifies() -> None:
    harness, coordinator = await _harness()
    before = harness.store.snapshot

    await coordinator.update_status(99, OrderStatus.CANCELLED)

    assert harness.store.snapshot is before
    assert harness.platform.delivered[0].options.body.startswith("고객님의")
    harness.dispatcher.close()


@pytest.mark.asyncio
async def test_assign_tracking_resyncs_instead_of_patching() -> None:
    harness, coordinator = await _harness()
    before = harness.store.snapshot

    result = await coordinator.assign_tracking(
        2,
        {"tracking_number": " 9876543210 ", "tracking_company": "CJ대한통운", "estimated_delivery": ""},
    )

    assert result == {"success": True}
    [(order_id, assignment)] = harness.backend.tracking_calls
    assert order_id == 2
    assert assignment.to_payload() == {"tracking_number": "9876543210", "tracking_company": "CJ대한통운"}
    assert harness.resyncs == [None]
    assert harness.store.snapshot is before


@pytest.mark.asyncio
async def test_invalid_tracking_input_is_rejected_before_backend() -> None:
    harness, coordinator = await _harness()

    with pytest.raises(MutationRejectedError, match="Invalid tracking assignment"):
        await coordinator.assign_tracking(1, {"tracking_number": "   "})

    assert harness.backend.tracking_calls == []
    assert harness.resyncs == []
