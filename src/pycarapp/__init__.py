"""pycarapp - Async Python client for a car charging-profile service."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pycarapp")
except PackageNotFoundError:
    __version__ = "0+local"
from pycarapp.app import CarApp
from pycarapp.client import CarClient
from pycarapp.config import CarAppConfig
from pycarapp.exceptions import (
    AuthError,
    CarAppApiError,
    CarAppConfigError,
    CarAppError,
    CarValidationError,
    CreateCarError,
    CreateFailedError,
    CreateUnavailableError,
    InvalidCredentialsError,
    InvalidSessionError,
    LoginConnectionError,
    LoginUnavailableError,
    NetworkUnavailableError,
    NoTokenError,
)
from pycarapp.models import (
    AuthToken,
    Car,
    CarCreate,
    CarForm,
    Connector,
    ConnectorType,
    LoginForm,
    User,
)
from pycarapp.render import Renderer
from pycarapp.session import AuthState, Session, SessionController
from pycarapp.state.pages import Page
from pycarapp.storage import FileTokenStorage, MemoryTokenStorage, TokenStorage
from pycarapp.view import ViewStateMachine

__all__ = [
    "__version__",
    "AuthError",
    "AuthState",
    "AuthToken",
    "Car",
    "CarApp",
    "CarAppApiError",
    "CarAppConfig",
    "CarAppConfigError",
    "CarAppError",
    "CarClient",
    "CarCreate",
    "CarForm",
    "CarValidationError",
    "Connector",
    "ConnectorType",
    "CreateCarError",
    "CreateFailedError",
    "CreateUnavailableError",
    "FileTokenStorage",
    "InvalidCredentialsError",
    "InvalidSessionError",
    "LoginConnectionError",
    "LoginForm",
    "LoginUnavailableError",
    "MemoryTokenStorage",
    "NetworkUnavailableError",
    "NoTokenError",
    "Page",
    "Renderer",
    "Session",
    "SessionController",
    "TokenStorage",
    "User",
    "ViewStateMachine",
]
