"""Authentication token model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pycarapp.models.user import User


class AuthToken(BaseModel):
    """Parsed body of a successful login.

    Parameters
    ----------
    access_token : str
        Opaque bearer credential.
    user : User
        Identity the token belongs to.
    raw : dict
        Full decoded response for access to additional fields.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(min_length=1)
    user: User
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
