"""Helpers for safe debug logging of backend traffic.

Requests carry a bearer token, and the order list carries the contact
details of both parties of every order (``sender_phone``,
``receiver_address``, ``receiver_zipcode`` and so on). Those values are
masked before a payload reaches a DEBUG log; personal names keep their
first character only. Long order lists are cut to a few entries.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SECRET_KEYS: frozenset[str] = frozenset({"authorization", "token", "accesstoken", "password", "cookie"})

# Matched against the part after the party prefix, e.g. receiver_[phone].
_CONTACT_SUFFIXES: tuple[str, ...] = ("phone", "email", "address", "detail_address", "zipcode")

REDACTED = "<redacted>"


def _is_contact_field(key: str) -> bool:
    return any(key == suffix or key.endswith(f"_{suffix}") for suffix in _CONTACT_SUFFIXES)


def _is_person_name(key: str) -> bool:
    return key in {"sender_name", "receiver_name", "customer_name", "name"}


def mask_name(name: str) -> str:
    """``"김철수"`` -> ``"김**"``; empty stays empty."""
    if not name:
        return name
    return name[0] + "*" * (len(name) - 1)


def redact_for_log(
    value: Any,
    *,
    max_string: int = 256,
    max_items: int = 5,
    _depth: int = 0,
) -> Any:
    """Return a copy of *value* that is safe to put in a debug log.

    Parameters
    ----------
    value
        Decoded JSON (or a request payload) to redact.
    max_string : int
        Strings longer than this are truncated.
    max_items : int
        Lists longer than this keep their first *max_items* entries plus a
        ``"<+N more>"`` marker.
    """
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for raw_key, item in value.items():
            key = str(raw_key)
            lowered = key.lower()
            if lowered in _SECRET_KEYS or _is_contact_field(lowered):
                redacted[key] = REDACTED
            elif _is_person_name(lowered) and isinstance(item, str):
                redacted[key] = mask_name(item)
            else:
                redacted[key] = redact_for_log(item, max_string=max_string, max_items=max_items, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        head = [
            redact_for_log(item, max_string=max_string, max_items=max_items, _depth=_depth + 1)
            for item in value[:max_items]
        ]
        if len(value) > max_items:
            head.append(f"<+{len(value) - max_items} more>")
        return head

    return repr(value)
