"""Base model for car service responses.

Every response model inherits from :class:`CarAppBaseModel` which provides:

* ``frozen=True`` so parsed records can be shared between the view state
  and render projections without defensive copies.
* A ``model_validator(mode="before")`` that drops explicit ``null`` values
  so the field default is used instead.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CarAppBaseModel(BaseModel):
    """Base for car service response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True, repr=False)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls_and_stash_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Only auto-stash raw when not explicitly provided (i.e. model_validate
        # from an API dict).
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
