"""Car record endpoints.

Endpoints:
  - GET  /api/v1/cars/
  - POST /api/v1/cars/
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from pycarapp._constants import CARS_ENDPOINT
from pycarapp._transport import Transport
from pycarapp.exceptions import (
    CarAppApiError,
    CreateFailedError,
    CreateUnavailableError,
    NetworkUnavailableError,
)
from pycarapp.models.car import Car, CarCreate

_logger = logging.getLogger(__name__)


async def fetch_cars(transport: Transport, token: str) -> list[Car]:
    """Fetch every car visible to the token's user, in server order."""
    response = await transport.request("GET", CARS_ENDPOINT, token=token)
    if not response.ok:
        raise CarAppApiError(
            f"{CARS_ENDPOINT} failed with HTTP {response.status}",
            status_code=response.status,
            endpoint=CARS_ENDPOINT,
        )
    if not isinstance(response.data, list):
        raise CarAppApiError(
            f"{CARS_ENDPOINT} did not return a list",
            status_code=response.status,
            endpoint=CARS_ENDPOINT,
        )
    try:
        return [Car.model_validate(item) for item in response.data]
    except ValidationError as exc:
        raise CarAppApiError(
            f"{CARS_ENDPOINT} returned an invalid car record",
            status_code=response.status,
            endpoint=CARS_ENDPOINT,
        ) from exc


async def create_car(transport: Transport, token: str | None, car: CarCreate) -> Car | None:
    """Create *car* and return the stored record when the service echoes it.

    A 2xx answer is a success even when its body is empty or unparseable.

    Raises
    ------
    CreateFailedError
        Non-2xx status.
    CreateUnavailableError
        The service could not be reached.
    """
    try:
        response = await transport.request(
            "POST",
            CARS_ENDPOINT,
            token=token,
            payload=car.model_dump(mode="json"),
        )
    except NetworkUnavailableError as exc:
        raise CreateUnavailableError(str(exc), endpoint=CARS_ENDPOINT) from exc

    if not response.ok:
        raise CreateFailedError(
            f"Creating car {car.name!r} failed with HTTP {response.status}",
            status_code=response.status,
        )

    if not isinstance(response.data, dict):
        return None
    try:
        return Car.model_validate(response.data)
    except ValidationError:
        _logger.debug("Create response for %r is not a car record", car.name, exc_info=True)
        return None
