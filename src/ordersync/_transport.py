"""HTTP transport with bearer authentication and status mapping."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from ordersync._constants import AUTH_REJECTED_STATUSES, USER_AGENT
from ordersync._redact import redact_for_log
from ordersync.config import SyncConfig
from ordersync.exceptions import AuthRejectedError, BackendError, TransportError
from ordersync.session import Session

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        ...


def _error_message(text: str) -> str:
    """Pull ``message``/``error`` out of a JSON error body, else the raw text."""
    try:
        body = json.loads(text)
    except json.JSONDecodeError:
        return text[:200]
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return text[:200]


class HttpTransport:
    """JSON-over-HTTP transport that attaches the session's bearer token."""

    def __init__(
        self,
        config: SyncConfig,
        session: Session,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._session = session
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        token = self._session.token
        if token:
            headers["authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Raises
        ------
        AuthRejectedError
            On HTTP 401/403. Never retried here.
        BackendError
            On any other non-2xx status, carrying the server's message.
        TransportError
            On network failure, timeout or a non-JSON body.
        """
        url = f"{self._config.base_url}{endpoint}"
        body = json.dumps(dict(payload)) if payload is not None else None

        _logger.debug("%s %s %s", method, url, redact_for_log(payload))

        try:
            async with self._http.request(
                method,
                url,
                data=body,
                headers=self._headers(),
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                status = resp.status
        except aiohttp.ClientError as exc:
            raise TransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except asyncio.TimeoutError as exc:
            raise TransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc

        if status in AUTH_REJECTED_STATUSES:
            raise AuthRejectedError(
                f"HTTP {status} from {endpoint}: {_error_message(text)}",
                status_code=status,
                endpoint=endpoint,
            )
        if not 200 <= status < 300:
            raise BackendError(
                _error_message(text) or f"HTTP {status} from {endpoint}",
                status_code=status,
                endpoint=endpoint,
            )

        if not text.strip():
            return {}
        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc

        if _logger.isEnabledFor(logging.DEBUG):
            _logger.debug("%s %s -> %s %s", method, endpoint, status, redact_for_log(result))
        return result
