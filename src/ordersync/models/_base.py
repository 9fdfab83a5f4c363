"""Base model and enum for backend payloads.

Every response model inherits from :class:`OrderSyncModel` which
provides:

* ``populate_by_name`` so both snake_case wire keys and the Python field
  names are accepted.
* A ``model_validator(mode="before")`` that strips empty strings so the
  field default is used.
* A ``raw`` dict that captures the original payload.

Closed-set enums inherit from :class:`FallbackStrEnum` which resolves any
value without a mapped member to ``UNKNOWN`` instead of raising.
"""

from __future__ import annotations

import enum
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator


def parse_timestamp(value: Any) -> datetime | None:
    """Coerce ISO-8601 strings (``Z`` suffix allowed) to aware UTC datetimes.

    Returns ``None`` for ``None`` and empty strings.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=UTC)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


Timestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]
"""Annotated type that coerces backend timestamps to UTC datetimes."""


class FallbackStrEnum(enum.StrEnum):
    """Base for closed-set string enums.

    Every subclass **must** define ``UNKNOWN``. Values the backend sends
    that have no mapped member resolve to ``UNKNOWN``.
    """

    @classmethod
    def _missing_(cls, value: object) -> FallbackStrEnum:
        unknown: FallbackStrEnum = cls["UNKNOWN"]
        return unknown


class OrderSyncModel(BaseModel):
    """Base for backend payload models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original backend payload."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Drop ``None`` and blank strings and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            cleaned[key] = value
        # Keep an explicit raw= (model_copy/kwargs construction) untouched.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
