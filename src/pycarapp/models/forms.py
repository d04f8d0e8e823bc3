"""Raw form input as a user interface delivers it.

Nothing here is validated: numeric fields hold whatever the user typed.
:mod:`pycarapp.validation` turns a :class:`CarForm` into a
:class:`~pycarapp.models.car.CarCreate`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

FormNumber = str | int | None


@dataclass(frozen=True, slots=True)
class LoginForm:
    username: str
    password: str = field(repr=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LoginForm:
        return cls(
            username=str(data.get("username") or ""),
            password=str(data.get("password") or ""),
        )


@dataclass(frozen=True, slots=True)
class CarForm:
    name: str
    connector_types: Sequence[str] = ()
    battery_charge_limit: FormNumber = None
    battery_size: FormNumber = None
    max_kw_ac: FormNumber = None
    max_kw_dc: FormNumber = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CarForm:
        """Build a form from a flat field mapping (e.g. a parsed form post).

        ``connector_types`` may be a single checked value or a sequence of
        them; a missing key means nothing was checked.
        """
        checked = data.get("connector_types") or ()
        if isinstance(checked, str):
            checked = (checked,)
        return cls(
            name=str(data.get("name") or ""),
            connector_types=tuple(str(value) for value in checked),
            battery_charge_limit=data.get("battery_charge_limit"),
            battery_size=data.get("battery_size"),
            max_kw_ac=data.get("max_kw_ac"),
            max_kw_dc=data.get("max_kw_dc"),
        )
