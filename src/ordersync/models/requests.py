"""Request payload models for mutating endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from ordersync.models.order import OrderStatus


class StatusUpdate(BaseModel):
    """Body of ``PATCH /shipping/orders/{id}/status``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: OrderStatus

    @field_validator("status")
    @classmethod
    def _reject_unknown(cls, value: OrderStatus) -> OrderStatus:
        if value is OrderStatus.UNKNOWN:
            raise ValueError("status must be one of the known order statuses")
        return value

    def to_payload(self) -> dict[str, Any]:
        return {"status": self.status.value}


class TrackingAssignment(BaseModel):
    """Body of ``POST /shipping/orders/{id}/tracking``."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    tracking_number: str
    tracking_company: str | None = None
    estimated_delivery: str | None = None

    @field_validator("tracking_number")
    @classmethod
    def _require_number(cls, value: str) -> str:
        if not value:
            raise ValueError("tracking_number must be non-empty")
        return value

    @field_validator("tracking_company", "estimated_delivery")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        return value or None

    def to_payload(self) -> dict[str, Any]:
        """Wire body; optional fields are omitted when unset."""
        return self.model_dump(exclude_none=True)
