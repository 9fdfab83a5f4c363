"""Explicit session object shared by every component that needs auth."""

from __future__ import annotations

import logging
import time
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from ordersync._constants import PRIVILEGED_ROLES

_logger = logging.getLogger(__name__)


@runtime_checkable
class CredentialStore(Protocol):
    """Externally owned credential persistence.

    This library only reads the bearer token and, when the backend rejects
    it, asks the store to forget it. It never writes a token.
    """

    def read(self) -> str | None:
        ...

    def clear(self) -> None:
        ...


class MemoryCredentialStore:
    """Process-local credential store, mostly useful in scripts and tests."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def read(self) -> str | None:
        return self._token

    def clear(self) -> None:
        self._token = None


class User(BaseModel):
    """The authenticated user as reported by the backend."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    id: int
    username: str
    name: str = ""
    role: str | None = None


class Session(BaseModel):
    """Authenticated session, constructed once and injected.

    Parameters
    ----------
    user : User or None
        The signed-in user, ``None`` before authentication.
    credentials : CredentialStore
        Store holding the opaque bearer token.
    authenticated_at : float
        Monotonic timestamp (``time.monotonic()``) of authentication.
    privileged_roles : tuple[str, ...]
        Roles treated as staff (may mutate orders, see the permission banner).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    user: User | None = None
    credentials: CredentialStore = Field(default_factory=MemoryCredentialStore)
    authenticated_at: float = Field(default_factory=time.monotonic)
    privileged_roles: tuple[str, ...] = PRIVILEGED_ROLES

    @property
    def token(self) -> str | None:
        """Current bearer token, if the credential store holds one."""
        return self.credentials.read()

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and bool(self.token)

    @property
    def is_privileged(self) -> bool:
        """Whether the user holds a staff role."""
        if not self.is_authenticated or self.user is None:
            return False
        return self.user.role in self.privileged_roles

    @property
    def age(self) -> float:
        """Seconds since authentication."""
        return time.monotonic() - self.authenticated_at

    def with_privileged_roles(self, roles: tuple[str, ...]) -> Session:
        """Return this session with *roles* as staff roles.

        The copy shares the credential store, so invalidating either one
        clears the token for both.
        """
        if tuple(roles) == self.privileged_roles:
            return self
        return self.model_copy(update={"privileged_roles": tuple(roles)})

    def invalidate(self) -> None:
        """Drop the stored credential after the backend rejected it."""
        _logger.warning("Credential rejected by backend; clearing stored token")
        self.credentials.clear()
