"""Custom exception hierarchy for ordersync."""

from __future__ import annotations


class OrderSyncError(Exception):
    """Base exception for all ordersync errors."""


class ConfigError(OrderSyncError):
    """Invalid or missing configuration."""


class TransportError(OrderSyncError):
    """HTTP-level failure (network, timeout, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class TransientFetchError(TransportError):
    """A refresh of the order list failed.

    The previous snapshot is kept and the next scheduled tick is the only
    retry.
    """


class BackendError(OrderSyncError):
    """Backend answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class AuthRejectedError(BackendError):
    """Backend rejected the bearer credential (HTTP 401 / 403).

    Never retried here. The session collaborator is expected to clear the
    stored credential and route the user back to authentication.
    """


class MutationRejectedError(BackendError):
    """A status or tracking update was refused.

    The cached snapshot is left untouched when this is raised.
    """


class PermissionUnavailableError(OrderSyncError):
    """OS notifications are unsupported or were not granted.

    Used internally to degrade to toast-only delivery; never surfaced to
    end users.
    """
