"""Toast queue, OS notification bridge and permission negotiation."""

from ordersync.notifications.dispatcher import NotificationDispatcher, StatusPresentation, status_presentation
from ordersync.notifications.permission import PermissionBanner, PermissionNegotiator
from ordersync.notifications.platform import (
    DeliveredNotification,
    HeadlessNotificationPlatform,
    NotificationPlatform,
)
from ordersync.notifications.toasts import ToastQueue

__all__ = [
    "DeliveredNotification",
    "HeadlessNotificationPlatform",
    "NotificationDispatcher",
    "NotificationPlatform",
    "PermissionBanner",
    "PermissionNegotiator",
    "StatusPresentation",
    "ToastQueue",
    "status_presentation",
]
