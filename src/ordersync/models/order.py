"""Shipping order model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, model_validator

from ordersync.models._base import FallbackStrEnum, OrderSyncModel, Timestamp


class OrderStatus(FallbackStrEnum):
    """Order lifecycle status.

    Member values are the strings the backend stores and sends.
    """

    RECEIVED = "접수완료"
    PREPARING = "배송준비"
    IN_TRANSIT = "배송중"
    DELIVERED = "배송완료"
    CANCELLED = "취소"
    RETURNED = "반송"
    UNKNOWN = "unknown"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.RETURNED)


class Order(OrderSyncModel):
    """A shipping order as listed by ``GET /shipping/orders``."""

    id: int
    """Stable order identifier."""
    status: OrderStatus = OrderStatus.UNKNOWN
    """Parsed status; unrecognized values land in ``UNKNOWN``."""
    status_text: str = ""
    """Status exactly as the backend sent it."""
    sender_name: str = Field(default="", validation_alias=AliasChoices("sender_name", "senderName"))
    receiver_name: str = Field(default="", validation_alias=AliasChoices("receiver_name", "receiverName"))
    tracking_number: str | None = Field(
        default=None,
        validation_alias=AliasChoices("tracking_number", "trackingNumber"),
    )
    tracking_company: str | None = Field(
        default=None,
        validation_alias=AliasChoices("tracking_company", "trackingCompany"),
    )
    estimated_delivery: str | None = Field(
        default=None,
        validation_alias=AliasChoices("estimated_delivery", "estimatedDelivery"),
    )
    package_type: str | None = Field(default=None, validation_alias=AliasChoices("package_type", "packageType"))
    delivery_type: str | None = Field(default=None, validation_alias=AliasChoices("delivery_type", "deliveryType"))
    created_at: Timestamp = Field(default=None, validation_alias=AliasChoices("created_at", "createdAt"))
    updated_at: Timestamp = Field(default=None, validation_alias=AliasChoices("updated_at", "updatedAt"))

    @model_validator(mode="before")
    @classmethod
    def _keep_status_text(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        status = values.get("status")
        if status is not None and "status_text" not in values:
            values = dict(values)
            values["status_text"] = str(status)
        return values

    def with_status(self, status: OrderStatus | str) -> Order:
        """Return a copy with only the status replaced."""
        return self.model_copy(update={"status": OrderStatus(status), "status_text": str(status)})

    def matches(self, search: str) -> bool:
        """Case-insensitive match on tracking number, sender or receiver."""
        needle = search.strip().lower()
        if not needle:
            return True
        haystack = (self.tracking_number or "", self.sender_name, self.receiver_name)
        return any(needle in field.lower() for field in haystack)
