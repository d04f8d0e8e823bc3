"""JSON-over-HTTP transport with bearer authentication."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from pycarapp._redact import redact_for_log
from pycarapp.config import CarAppConfig
from pycarapp.exceptions import NetworkUnavailableError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    """Status code and decoded JSON body of one HTTP exchange."""

    status: int
    data: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        token: str | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> ApiResponse:
        ...


class HttpTransport:
    """aiohttp transport.

    Every HTTP answer, whatever its status, comes back as an
    :class:`ApiResponse`; endpoint modules decide what a status means.
    Only failures that produce no HTTP answer raise
    :class:`NetworkUnavailableError`.
    """

    def __init__(self, config: CarAppConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    def _headers(self, token: str | None, has_body: bool) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": self._config.user_agent,
        }
        if has_body:
            headers["content-type"] = "application/json"
        if token:
            headers["authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        token: str | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> ApiResponse:
        url = f"{self._config.base_url}{endpoint}"
        body = json.dumps(dict(payload)) if payload is not None else None
        headers = self._headers(token, body is not None)

        _logger.debug("%s %s body=%s", method, url, redact_for_log(payload))

        try:
            async with self._http.request(method, url, data=body, headers=headers) as resp:
                status = resp.status
                raw = await resp.read()
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise NetworkUnavailableError(
                f"{method} {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        _logger.debug("%s %s -> HTTP %d", method, url, status)

        try:
            # JSON bodies are UTF-8 whatever charset the server claims.
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            _logger.debug("Undecodable body from %s: %r", endpoint, raw[:200])
            return ApiResponse(status=status)

        if not text.strip():
            return ApiResponse(status=status)

        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            # Error pages are often HTML. Endpoints that need a body treat
            # ``data is None`` as a malformed answer.
            _logger.debug("Non-JSON body from %s: %s", endpoint, text[:200])
            return ApiResponse(status=status)

        return ApiResponse(status=status, data=data)
