"""Render projections and the renderer interface.

The projection functions are pure: they turn state into small view models
and never touch a renderer. :class:`~pycarapp.view.ViewStateMachine` decides
*when* to render; a :class:`Renderer` decides *how*.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from pycarapp._constants import DASHBOARD_PREVIEW_LIMIT, EMPTY_DASHBOARD_MESSAGE
from pycarapp.models.car import Car
from pycarapp.models.user import User
from pycarapp.state.pages import FormName, Page

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HeaderView:
    visible: bool
    username: str = ""


@dataclass(frozen=True, slots=True)
class DashboardView:
    car_names: tuple[str, ...]
    empty_message: str | None = None


@dataclass(frozen=True, slots=True)
class CarRow:
    name: str
    connectors: str
    battery_charge_limit: int | None
    battery_size: int | None
    max_kw_ac: int | None
    max_kw_dc: int | None


@dataclass(frozen=True, slots=True)
class CarsTableView:
    rows: tuple[CarRow, ...]

    @property
    def show_list(self) -> bool:
        return bool(self.rows)

    @property
    def show_empty(self) -> bool:
        return not self.rows


def project_header(user: User | None) -> HeaderView:
    if user is None:
        return HeaderView(visible=False)
    return HeaderView(visible=True, username=user.username)


def project_dashboard(cars: Sequence[Car]) -> DashboardView:
    """First few car names in list order, or the empty-state message."""
    if not cars:
        return DashboardView(car_names=(), empty_message=EMPTY_DASHBOARD_MESSAGE)
    return DashboardView(car_names=tuple(car.name for car in cars[:DASHBOARD_PREVIEW_LIMIT]))


def project_car_row(car: Car) -> CarRow:
    return CarRow(
        name=car.name,
        connectors=car.connector_display,
        battery_charge_limit=car.battery_charge_limit,
        battery_size=car.battery_size,
        max_kw_ac=car.max_kw_ac,
        max_kw_dc=car.max_kw_dc,
    )


def project_cars_table(cars: Sequence[Car]) -> CarsTableView:
    return CarsTableView(rows=tuple(project_car_row(car) for car in cars))


class Renderer(Protocol):
    """Everything the view layer can ask a user interface to do."""

    def show_page(self, page: Page, header: HeaderView) -> None:
        """Show *page*, hide every other page, and update the header."""
        ...

    def render_cars(self, dashboard: DashboardView, table: CarsTableView) -> None:
        ...

    def set_loading(self, loading: bool) -> None:
        """Toggle every loading/submit affordance at once."""
        ...

    def show_error(self, message: str | None) -> None:
        """Fill the error slot, or hide it when *message* is ``None``."""
        ...

    def reset_form(self, form: FormName) -> None:
        ...


class LoggingRenderer:
    """Renderer that only logs; the default when no user interface is attached."""

    def show_page(self, page: Page, header: HeaderView) -> None:
        _logger.debug("Show page=%s header=%s", page, header)

    def render_cars(self, dashboard: DashboardView, table: CarsTableView) -> None:
        _logger.debug("Render %d car row(s), dashboard=%s", len(table.rows), dashboard.car_names)

    def set_loading(self, loading: bool) -> None:
        _logger.debug("Loading=%s", loading)

    def show_error(self, message: str | None) -> None:
        _logger.debug("Error slot=%r", message)

    def reset_form(self, form: FormName) -> None:
        _logger.debug("Reset form=%s", form)
