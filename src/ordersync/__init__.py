"""ordersync - Async order synchronization and notification core."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("ordersync")
except PackageNotFoundError:
    __version__ = "0+local"
from ordersync.backend import Backend
from ordersync.client import OrderSyncClient
from ordersync.config import SyncConfig
from ordersync.coordinator import StatusMutationCoordinator
from ordersync.exceptions import (
    AuthRejectedError,
    BackendError,
    ConfigError,
    MutationRejectedError,
    OrderSyncError,
    PermissionUnavailableError,
    TransientFetchError,
    TransportError,
)
from ordersync.models import (
    NewOrderInfo,
    NotificationOptions,
    Order,
    OrderStatus,
    OrderStatusChange,
    PermissionState,
    Snapshot,
    Toast,
    ToastSeverity,
    TrackingAssignment,
)
from ordersync.monitor import OrderMonitor
from ordersync.notifications import (
    HeadlessNotificationPlatform,
    NotificationDispatcher,
    NotificationPlatform,
    PermissionBanner,
    PermissionNegotiator,
)
from ordersync.scheduler import Scheduler, SchedulerState
from ordersync.session import CredentialStore, MemoryCredentialStore, Session, User
from ordersync.state.store import SyncStore

__all__ = [
    "__version__",
    "AuthRejectedError",
    "Backend",
    "BackendError",
    "ConfigError",
    "CredentialStore",
    "HeadlessNotificationPlatform",
    "MemoryCredentialStore",
    "MutationRejectedError",
    "NewOrderInfo",
    "NotificationDispatcher",
    "NotificationOptions",
    "NotificationPlatform",
    "Order",
    "OrderMonitor",
    "OrderStatus",
    "OrderStatusChange",
    "OrderSyncClient",
    "OrderSyncError",
    "PermissionBanner",
    "PermissionNegotiator",
    "PermissionState",
    "PermissionUnavailableError",
    "Scheduler",
    "SchedulerState",
    "Session",
    "Snapshot",
    "StatusMutationCoordinator",
    "SyncConfig",
    "SyncStore",
    "Toast",
    "ToastSeverity",
    "TrackingAssignment",
    "TransientFetchError",
    "TransportError",
    "User",
]
