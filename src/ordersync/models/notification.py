"""Notification models: toasts, OS notification options and permission."""

from __future__ import annotations

import enum
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from ordersync.models.order import OrderStatus


class ToastSeverity(enum.StrEnum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class PermissionState(enum.StrEnum):
    """OS notification permission, as reported by the platform."""

    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


class Toast(BaseModel):
    """An in-app alert shown until it expires or is removed."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    severity: ToastSeverity
    title: str
    message: str
    timeout: float
    """Lifetime in seconds; ``<= 0`` keeps the toast until removed."""
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_persistent(self) -> bool:
        return self.timeout <= 0


class NotificationOptions(BaseModel):
    """Options for one OS-level notification."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str
    body: str = ""
    icon: str | None = None
    tag: str | None = None
    """Coalescing key: a later notification with the same tag replaces the earlier one."""
    require_interaction: bool = False
    timeout: float | None = None
    """Auto-close delay in seconds; ``None`` leaves closing to the platform."""


class OrderStatusChange(BaseModel):
    """Input to :meth:`NotificationDispatcher.notify_order_status_change`."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    order_id: int
    status: str
    """Status text as the backend knows it; need not be a known status."""
    customer_name: str | None = None
    tracking_number: str | None = None

    @property
    def parsed_status(self) -> OrderStatus:
        return OrderStatus(self.status)


class NewOrderInfo(BaseModel):
    """Input to :meth:`NotificationDispatcher.notify_new_order`."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    order_id: int
    customer_name: str
    product_name: str | None = None
    amount: float | None = None
