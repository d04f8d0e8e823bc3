"""Custom exception hierarchy for pycarapp."""

from __future__ import annotations


class CarAppError(Exception):
    """Base exception for all pycarapp errors."""


class CarAppConfigError(CarAppError):
    """Invalid or missing configuration."""


class NetworkUnavailableError(CarAppError):
    """Transport-level failure before any HTTP response was received."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class CarAppApiError(CarAppError):
    """The service answered with a non-2xx status or an unreadable body."""

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


class AuthError(CarAppError):
    """Base for login and session failures."""


class InvalidCredentialsError(AuthError):
    """Login rejected with HTTP 401."""


class LoginUnavailableError(AuthError):
    """Login could not be completed (non-401 error status or bad response)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class LoginConnectionError(LoginUnavailableError, NetworkUnavailableError):
    """The login service could not be reached at all."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        super().__init__(message)
        self.endpoint = endpoint


class NoTokenError(AuthError):
    """No stored token exists, so there is no session to verify."""


class InvalidSessionError(AuthError):
    """The stored token was rejected or could not be verified.

    The stored token has already been cleared when this is raised.
    """


class CarValidationError(CarAppError):
    """A car form field failed its client-side bound check."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(message)


class CreateCarError(CarAppError):
    """Base for failures while creating a car record."""


class CreateFailedError(CreateCarError):
    """The service answered the create request with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class CreateUnavailableError(CreateCarError, NetworkUnavailableError):
    """The create request never reached the service."""
