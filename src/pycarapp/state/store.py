"""In-memory view state.

Only :class:`~pycarapp.view.ViewStateMachine` mutates a :class:`ViewState`;
renderers receive read-only projections of it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pycarapp.models.car import Car
from pycarapp.state.pages import Page, shows_car_list


class ViewState(BaseModel):
    """What the client is currently showing.

    ``cars`` is replaced wholesale by each successful fetch and is only
    emptied by logout; navigating away from a list page keeps it.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    current_page: Page = Page.LOGIN
    cars: list[Car] = Field(default_factory=list)
    loading: bool = False
    error_message: str | None = None

    @property
    def cars_visible(self) -> bool:
        return shows_car_list(self.current_page)

    def replace_cars(self, cars: list[Car]) -> None:
        self.cars = list(cars)

    def clear_cars(self) -> None:
        self.cars = []
