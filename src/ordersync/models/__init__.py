"""Data models for orders, snapshots and notifications."""

from ordersync.models._base import FallbackStrEnum, OrderSyncModel, Timestamp, parse_timestamp
from ordersync.models.notification import (
    NewOrderInfo,
    NotificationOptions,
    OrderStatusChange,
    PermissionState,
    Toast,
    ToastSeverity,
)
from ordersync.models.order import Order, OrderStatus
from ordersync.models.requests import StatusUpdate, TrackingAssignment
from ordersync.models.snapshot import Snapshot, count_statuses

__all__ = [
    "FallbackStrEnum",
    "NewOrderInfo",
    "NotificationOptions",
    "Order",
    "OrderStatus",
    "OrderStatusChange",
    "OrderSyncModel",
    "PermissionState",
    "Snapshot",
    "StatusUpdate",
    "Timestamp",
    "Toast",
    "ToastSeverity",
    "TrackingAssignment",
    "count_statuses",
    "parse_timestamp",
]
