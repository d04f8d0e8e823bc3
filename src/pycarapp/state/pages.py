"""The fixed set of pages and which of them display the car list."""

from __future__ import annotations

from enum import StrEnum


class Page(StrEnum):
    LOGIN = "login"
    DASHBOARD = "dashboard"
    CARS = "cars"
    ADD_CAR = "add-car"


#: Pages that display the car list; navigating to one refreshes it.
CAR_LIST_PAGES: frozenset[Page] = frozenset({Page.DASHBOARD, Page.CARS})


def shows_car_list(page: Page) -> bool:
    return page in CAR_LIST_PAGES


class FormName(StrEnum):
    LOGIN = "login-form"
    ADD_CAR = "add-car-form"
