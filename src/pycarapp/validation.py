"""Client-side validation of the add-car form.

Fields are checked in a fixed order and the first failure wins, so the
message a user sees for a form with several bad fields is deterministic:
charge limit, then battery size, then AC power, then DC power.
"""

from __future__ import annotations

import re
from typing import Any

from pycarapp.exceptions import CarValidationError
from pycarapp.models.car import CarCreate
from pycarapp.models.forms import CarForm

INVALID_INTEGER_MESSAGE = "Input should be a valid integer"

#: ``(field, minimum, maximum)`` in the order they are checked.
#: ``None`` means the field has no upper bound.
CAR_FIELD_BOUNDS: tuple[tuple[str, int, int | None], ...] = (
    ("battery_charge_limit", 1, 100),
    ("battery_size", 1, None),
    ("max_kw_ac", 1, None),
    ("max_kw_dc", 1, None),
)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_form_integer(value: Any) -> int | None:
    """Read an integer the way a number field's text is read.

    Only the leading integer counts: ``"42kW"`` is 42 and ``"12.7"`` is 12.
    Returns ``None`` when there is no leading integer at all.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def validate_integer_input(value: int, minimum: int, maximum: int | None = None) -> str | None:
    """Return the bound-violation message for *value*, or ``None`` if it is in range.

    >>> validate_integer_input(0, 1, 100)
    'Input should be greater than 0'
    >>> validate_integer_input(150, 1, 100)
    'Input should be less than or equal to 100'
    >>> validate_integer_input(50, 1, 100) is None
    True
    """
    if value < minimum:
        return f"Input should be greater than {minimum - 1}"
    if maximum is not None and value > maximum:
        return f"Input should be less than or equal to {maximum}"
    return None


def validate_car_form(form: CarForm) -> CarCreate:
    """Run the ordered pipeline and build the request body.

    Raises
    ------
    CarValidationError
        For the first field that is not an integer or is out of bounds.
    """
    values: dict[str, int] = {}
    for field, minimum, maximum in CAR_FIELD_BOUNDS:
        parsed = parse_form_integer(getattr(form, field))
        if parsed is None:
            raise CarValidationError(field, INVALID_INTEGER_MESSAGE)
        error = validate_integer_input(parsed, minimum, maximum)
        if error is not None:
            raise CarValidationError(field, error)
        values[field] = parsed

    # Connector types are collected as checked, never validated.
    return CarCreate(
        name=form.name,
        connector_types=list(form.connector_types),
        **values,
    )
