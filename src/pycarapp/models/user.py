"""User identity model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    """The authenticated identity returned by the auth endpoints.

    Only ``username`` is relied upon; any other fields the service sends are
    kept as extra attributes.
    """

    model_config = ConfigDict(frozen=True, extra="allow", str_strip_whitespace=True)

    username: str
