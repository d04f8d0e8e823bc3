"""Session state and the credential lifecycle."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Protocol

from pydantic import BaseModel, ConfigDict, model_validator

from pycarapp._constants import TOKEN_STORAGE_KEY
from pycarapp.exceptions import InvalidSessionError, NoTokenError
from pycarapp.models.token import AuthToken
from pycarapp.models.user import User
from pycarapp.storage import TokenStorage

_logger = logging.getLogger(__name__)


class AuthState(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    VERIFYING = "verifying"
    AUTHENTICATED = "authenticated"


class Session(BaseModel):
    """Immutable snapshot of the client's credentials.

    Parameters
    ----------
    token : str or None
        Bearer credential, if any.
    user : User or None
        Verified identity. Only ever present together with ``token``; a token
        without a user has not been verified yet.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    token: str | None = None
    user: User | None = None

    @model_validator(mode="after")
    def _user_requires_token(self) -> Session:
        if self.user is not None and not self.token:
            raise ValueError("a session user requires a token")
        return self

    @property
    def auth_state(self) -> AuthState:
        if not self.token:
            return AuthState.UNAUTHENTICATED
        if self.user is None:
            return AuthState.VERIFYING
        return AuthState.AUTHENTICATED


class AuthApi(Protocol):
    """The part of :class:`pycarapp.client.CarClient` sessions rely on."""

    async def login(self, username: str, password: str) -> AuthToken:
        ...

    async def get_current_user(self, token: str) -> User:
        ...


class SessionController:
    """Owns the token and user and moves them through login, probe and logout.

    The stored token is read once at construction, without any network call,
    so the initial state is :attr:`AuthState.VERIFYING` when a token survived
    a restart and :attr:`AuthState.UNAUTHENTICATED` otherwise.
    """

    def __init__(
        self,
        api: AuthApi,
        storage: TokenStorage,
        *,
        storage_key: str = TOKEN_STORAGE_KEY,
    ) -> None:
        self._api = api
        self._storage = storage
        self._storage_key = storage_key
        self._session = Session(token=storage.get(storage_key))

    @property
    def session(self) -> Session:
        return self._session

    @property
    def token(self) -> str | None:
        return self._session.token

    @property
    def user(self) -> User | None:
        return self._session.user

    @property
    def auth_state(self) -> AuthState:
        return self._session.auth_state

    async def login(self, username: str, password: str) -> Session:
        """Authenticate and persist the issued token.

        Errors from :func:`pycarapp._api.auth.login` propagate unchanged and
        leave both storage and the current session untouched.
        """
        token = await self._api.login(username, password)
        self._storage.set(self._storage_key, token.access_token)
        self._session = Session(token=token.access_token, user=token.user)
        _logger.debug("Logged in as %s", token.user.username)
        return self._session

    async def probe(self) -> Session:
        """Verify the stored token against the service.

        Raises
        ------
        NoTokenError
            Nothing is stored; no request is made.
        InvalidSessionError
            The token was rejected or could not be checked. The session has
            been logged out before this is raised.
        """
        token = self._storage.get(self._storage_key)
        if not token:
            self._session = Session()
            raise NoTokenError("No stored access token")

        self._session = Session(token=token)
        try:
            user = await self._api.get_current_user(token)
        except Exception as exc:
            # Any failure invalidates the stored token.
            _logger.debug("Stored token could not be verified: %r", exc)
            self.logout()
            raise InvalidSessionError("Stored session is no longer valid") from exc

        self._session = Session(token=token, user=user)
        _logger.debug("Session verified for %s", user.username)
        return self._session

    def logout(self) -> None:
        """Forget the token and user. Safe to call any number of times."""
        self._storage.remove(self._storage_key)
        self._session = Session()
