"""Data models for the car service and its forms."""

from pycarapp.models._base import CarAppBaseModel
from pycarapp.models.car import Car, CarCreate, Connector, ConnectorType, unique_connector_types
from pycarapp.models.forms import CarForm, LoginForm
from pycarapp.models.token import AuthToken
from pycarapp.models.user import User

__all__ = [
    "AuthToken",
    "Car",
    "CarAppBaseModel",
    "CarCreate",
    "CarForm",
    "Connector",
    "ConnectorType",
    "LoginForm",
    "User",
    "unique_connector_types",
]
