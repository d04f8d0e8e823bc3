"""Authentication endpoints.

Endpoints:
  - POST /api/v1/auth/login
  - GET  /api/v1/auth/me
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pycarapp._constants import LOGIN_ENDPOINT, ME_ENDPOINT
from pycarapp._redact import redact_for_log
from pycarapp._transport import Transport
from pycarapp.exceptions import (
    CarAppApiError,
    InvalidCredentialsError,
    LoginConnectionError,
    LoginUnavailableError,
    NetworkUnavailableError,
)
from pycarapp.models.token import AuthToken
from pycarapp.models.user import User

_logger = logging.getLogger(__name__)


def parse_login_response(data: Any) -> AuthToken:
    """Parse a 2xx login body into an :class:`AuthToken`.

    A success status whose body could not be read as JSON at all (``data`` is
    ``None``) is reported the same way as an unreachable service; the user
    sees "Unable to connect to login service". A JSON body that is the wrong
    shape is a plain login failure.

    Raises
    ------
    LoginConnectionError
        If there is no readable JSON body.
    LoginUnavailableError
        If the body is not an object or lacks ``access_token`` or ``user``.
    """
    _logger.debug("Login response parsed=%s", redact_for_log(data))
    if data is None:
        raise LoginConnectionError("Login response body is not JSON", endpoint=LOGIN_ENDPOINT)
    if not isinstance(data, dict):
        raise LoginUnavailableError("Login response is not a JSON object")
    try:
        return AuthToken(
            access_token=data.get("access_token"),
            user=data.get("user"),
            raw=data,
        )
    except ValidationError as exc:
        raise LoginUnavailableError(f"Login response missing token fields: {exc.error_count()} error(s)") from exc


async def login(transport: Transport, username: str, password: str) -> AuthToken:
    """Exchange credentials for an access token.

    Raises
    ------
    InvalidCredentialsError
        HTTP 401.
    LoginConnectionError
        The service could not be reached, or answered 2xx without a JSON body.
    LoginUnavailableError
        Any other non-2xx status or a malformed success body.
    """
    try:
        response = await transport.request(
            "POST",
            LOGIN_ENDPOINT,
            payload={"username": username, "password": password},
        )
    except NetworkUnavailableError as exc:
        raise LoginConnectionError(str(exc), endpoint=LOGIN_ENDPOINT) from exc

    if response.ok:
        return parse_login_response(response.data)
    if response.status == 401:
        raise InvalidCredentialsError(f"Login rejected for {username!r}")
    raise LoginUnavailableError(
        f"Login failed with HTTP {response.status}",
        status_code=response.status,
    )


def parse_me_response(data: Any) -> User:
    """Extract the user from a ``/me`` body.

    The service wraps the identity as ``{"user": {...}}``; a bare user object
    is accepted as well.
    """
    payload = data.get("user", data) if isinstance(data, dict) else None
    if not isinstance(payload, dict):
        raise CarAppApiError("Identity response has no user", endpoint=ME_ENDPOINT)
    try:
        return User.model_validate(payload)
    except ValidationError as exc:
        raise CarAppApiError("Identity response has an invalid user", endpoint=ME_ENDPOINT) from exc


async def fetch_current_user(transport: Transport, token: str) -> User:
    """Return the user *token* belongs to.

    Raises :class:`CarAppApiError` for any non-2xx status (401 included) and
    lets :class:`NetworkUnavailableError` propagate; the session layer treats
    both as an invalid session.
    """
    response = await transport.request("GET", ME_ENDPOINT, token=token)
    if not response.ok:
        raise CarAppApiError(
            f"{ME_ENDPOINT} failed with HTTP {response.status}",
            status_code=response.status,
            endpoint=ME_ENDPOINT,
        )
    return parse_me_response(response.data)
