"""High-level async client for the car service API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pycarapp._api import auth as _auth_api
from pycarapp._api import cars as _cars_api
from pycarapp._transport import HttpTransport, Transport
from pycarapp.config import CarAppConfig
from pycarapp.exceptions import CarAppError
from pycarapp.models.car import Car, CarCreate
from pycarapp.models.token import AuthToken
from pycarapp.models.user import User

_logger = logging.getLogger(__name__)


class CarClient:
    """Async client for the car service API.

    The client holds no credentials; every authenticated call takes the
    bearer token explicitly so the session layer stays the only owner of it.

    Usage::

        async with CarClient(config) as client:
            token = await client.login("alice", "pw")
            cars = await client.get_cars(token.access_token)
    """

    def __init__(
        self,
        config: CarAppConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or CarAppConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport

    @property
    def config(self) -> CarAppConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CarClient:
        if self._transport is None:
            if self._http_session is None:
                timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)
                self._http_session = aiohttp.ClientSession(timeout=timeout)
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise CarAppError("Client not initialized. Use 'async with CarClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def login(self, username: str, password: str) -> AuthToken:
        """Authenticate and return the issued token and user."""
        return await _auth_api.login(self._require_transport(), username, password)

    async def get_current_user(self, token: str) -> User:
        """Return the user *token* belongs to."""
        return await _auth_api.fetch_current_user(self._require_transport(), token)

    async def get_cars(self, token: str) -> list[Car]:
        """Return all cars, in the order the service lists them."""
        cars = await _cars_api.fetch_cars(self._require_transport(), token)
        _logger.debug("Fetched %d car(s)", len(cars))
        return cars

    async def create_car(self, token: str | None, car: CarCreate) -> Car | None:
        """Create a car; returns the stored record when the service echoes it."""
        return await _cars_api.create_car(self._require_transport(), token, car)
