"""Car record models."""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pycarapp._constants import CONNECTOR_DISPLAY_FALLBACK
from pycarapp.models._base import CarAppBaseModel


class ConnectorType(StrEnum):
    """Connector options offered by the add-car form."""

    TYPE_1 = "type1"
    TYPE_2 = "type2"
    CCS_1 = "ccs1"
    CCS_2 = "ccs2"
    CHADEMO = "chademo"
    NACS = "nacs"


def _connector_token(item: Any) -> str | None:
    """Extract the connector token from any shape the service sends.

    Accepted: ``"ccs2"``, ``{"type": "ccs2"}`` and ``{"type": {"value": "ccs2"}}``.
    """
    if isinstance(item, dict):
        item = item.get("type")
        if isinstance(item, dict):
            item = item.get("value")
    if isinstance(item, StrEnum):
        item = item.value
    if isinstance(item, str) and item.strip():
        return item.strip()
    return None


class Connector(BaseModel):
    """One charging connector of a car."""

    model_config = ConfigDict(frozen=True)

    type: str

    @property
    def known_type(self) -> ConnectorType | None:
        """The matching :class:`ConnectorType`, or ``None`` for tokens we do not list."""
        try:
            return ConnectorType(self.type)
        except ValueError:
            return None


class Car(CarAppBaseModel):
    """A car's charging-capability profile as returned by ``GET /api/v1/cars/``.

    The service is authoritative for every field; the client never edits a
    ``Car`` after parsing it.
    """

    id: int | str | None = None
    name: str = ""
    connectors: list[Connector] = Field(
        default_factory=list,
        validation_alias=AliasChoices("connectors", "connector_types"),
    )
    """Empty when the service sends no connector information."""
    battery_charge_limit: int | None = None
    """Charge limit in percent (1-100)."""
    battery_size: int | None = None
    """Usable battery capacity in kWh."""
    max_kw_ac: int | None = None
    max_kw_dc: int | None = None

    @field_validator("connectors", mode="before")
    @classmethod
    def _normalize_connectors(cls, value: Any) -> list[dict[str, str]]:
        if not isinstance(value, (list, tuple)):
            return []
        tokens = (_connector_token(item) for item in value)
        return [{"type": token} for token in tokens if token is not None]

    @property
    def connector_types(self) -> list[str]:
        return [connector.type for connector in self.connectors]

    @property
    def connector_display(self) -> str:
        """Connector tokens joined by ``", "``, or ``"-"`` when there are none."""
        if not self.connectors:
            return CONNECTOR_DISPLAY_FALLBACK
        return ", ".join(self.connector_types)


def unique_connector_types(values: Iterable[Any]) -> list[str]:
    """De-duplicate checked connector options, keeping first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        token = _connector_token(value)
        if token is not None:
            seen.setdefault(token, None)
    return list(seen)


class CarCreate(BaseModel):
    """Body of ``POST /api/v1/cars/``.

    The bounds mirror the ones the form pipeline enforces, so a record that
    was not validated first cannot be built by accident.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    connector_types: list[str] = Field(default_factory=list)
    battery_charge_limit: int = Field(ge=1, le=100)
    battery_size: int = Field(ge=1)
    max_kw_ac: int = Field(ge=1)
    max_kw_dc: int = Field(ge=1)

    @field_validator("connector_types", mode="before")
    @classmethod
    def _dedupe_connector_types(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        return unique_connector_types(value)
