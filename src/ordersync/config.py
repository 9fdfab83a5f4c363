"""Client configuration for ordersync."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from ordersync._constants import (
    BANNER_DELAY,
    BASE_URL,
    DEFAULT_ICON,
    NEW_ORDER_TOAST_TIMEOUT,
    OS_NOTIFICATION_TIMEOUT,
    POLL_INTERVAL,
    PRIVILEGED_ROLES,
    REQUEST_TIMEOUT,
    STATUS_TOAST_TIMEOUT,
    TOAST_TIMEOUT,
)
from ordersync.exceptions import ConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env_key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class SyncConfig:
    """Order synchronization configuration.

    Parameters
    ----------
    base_url : str
        Backend API base URL, without a trailing slash.
    poll_interval : float
        Seconds between two scheduled refreshes.
    request_timeout : float
        Total timeout in seconds for one backend request.
    toast_timeout : float
        Default toast lifetime in seconds when the caller gives none.
    status_toast_timeout : float
        Lifetime of the toast emitted on an order status change.
    new_order_toast_timeout : float
        Lifetime of the toast emitted for a newly received order.
    os_notification_timeout : float
        Auto-close delay of the OS notification for status changes.
    banner_delay : float
        Seconds after authentication before the permission banner may show.
    strict_ordering : bool
        Discard refresh responses older than the last applied one
        ("most-recent-request-wins"). When ``False`` the last response to
        complete always wins.
    privileged_roles : tuple[str, ...]
        User roles allowed to mutate orders and to see the permission banner.
    default_icon : str
        Icon used for OS notifications that do not name one.
    """

    base_url: str = BASE_URL
    poll_interval: float = POLL_INTERVAL
    request_timeout: float = REQUEST_TIMEOUT
    toast_timeout: float = TOAST_TIMEOUT
    status_toast_timeout: float = STATUS_TOAST_TIMEOUT
    new_order_toast_timeout: float = NEW_ORDER_TOAST_TIMEOUT
    os_notification_timeout: float = OS_NOTIFICATION_TIMEOUT
    banner_delay: float = BANNER_DELAY
    strict_ordering: bool = True
    privileged_roles: tuple[str, ...] = PRIVILEGED_ROLES
    default_icon: str = DEFAULT_ICON

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.request_timeout <= 0:
            raise ConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.banner_delay < 0:
            raise ConfigError(f"banner_delay must not be negative, got {self.banner_delay}")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> SyncConfig:
        """Create configuration from environment variables.

        Reads ``ORDERSYNC_BASE_URL`` and the optional ``ORDERSYNC_*`` timing
        variables. Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        SyncConfig
            Populated configuration.

        Raises
        ------
        ConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        base_url = env.get("ORDERSYNC_BASE_URL")
        if base_url is not None:
            config_kwargs["base_url"] = base_url

        _ENV_FLOAT_MAP = {
            "ORDERSYNC_POLL_INTERVAL": "poll_interval",
            "ORDERSYNC_REQUEST_TIMEOUT": "request_timeout",
            "ORDERSYNC_TOAST_TIMEOUT": "toast_timeout",
            "ORDERSYNC_STATUS_TOAST_TIMEOUT": "status_toast_timeout",
            "ORDERSYNC_NEW_ORDER_TOAST_TIMEOUT": "new_order_toast_timeout",
            "ORDERSYNC_OS_NOTIFICATION_TIMEOUT": "os_notification_timeout",
            "ORDERSYNC_BANNER_DELAY": "banner_delay",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        if "strict_ordering" not in overrides:
            config_kwargs["strict_ordering"] = _env_bool(env.get("ORDERSYNC_STRICT_ORDERING"), True)

        roles_env = env.get("ORDERSYNC_PRIVILEGED_ROLES")
        if roles_env is not None and "privileged_roles" not in overrides:
            roles = tuple(role.strip() for role in roles_env.split(",") if role.strip())
            if not roles:
                raise ConfigError("ORDERSYNC_PRIVILEGED_ROLES must name at least one role")
            config_kwargs["privileged_roles"] = roles

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
