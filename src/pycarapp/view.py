"""View state machine: pages, car list, loading flag and error slot.

All handlers run on the event loop thread. The only suspension points are the
service calls, so state is never touched concurrently, but a second submit can
start while the first is still outstanding; nothing de-duplicates or cancels
requests.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from pycarapp._constants import (
    MSG_CREATE_FAILED,
    MSG_CREATE_UNREACHABLE,
    MSG_INVALID_CREDENTIALS,
    MSG_LOGIN_FAILED,
    MSG_LOGIN_UNREACHABLE,
)
from pycarapp.exceptions import (
    CarAppError,
    CarValidationError,
    CreateFailedError,
    CreateUnavailableError,
    InvalidCredentialsError,
    InvalidSessionError,
    LoginConnectionError,
    LoginUnavailableError,
    NoTokenError,
)
from pycarapp.models.car import Car, CarCreate
from pycarapp.models.forms import CarForm, LoginForm
from pycarapp.models.user import User
from pycarapp.render import (
    LoggingRenderer,
    Renderer,
    project_cars_table,
    project_dashboard,
    project_header,
)
from pycarapp.session import SessionController
from pycarapp.state.pages import FormName, Page, shows_car_list
from pycarapp.state.store import ViewState
from pycarapp.validation import validate_car_form

_logger = logging.getLogger(__name__)


class CarsApi(Protocol):
    """The part of :class:`pycarapp.client.CarClient` the view relies on."""

    async def get_cars(self, token: str) -> list[Car]:
        ...

    async def create_car(self, token: str | None, car: CarCreate) -> Car | None:
        ...


class ViewStateMachine:
    """Reacts to navigation and form submissions and drives a :class:`Renderer`.

    Parameters
    ----------
    session : SessionController
        Source of the current token and user.
    api : CarsApi
        Car list and creation calls.
    renderer : Renderer, optional
        User interface adapter. Defaults to :class:`LoggingRenderer`.
    state : ViewState, optional
        Initial state; a fresh login-page state by default.
    """

    def __init__(
        self,
        session: SessionController,
        api: CarsApi,
        *,
        renderer: Renderer | None = None,
        state: ViewState | None = None,
    ) -> None:
        self._session = session
        self._api = api
        self._renderer: Renderer = renderer or LoggingRenderer()
        self._state = state or ViewState()
        self._background: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Read-only views of the state
    # ------------------------------------------------------------------

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def current_page(self) -> Page:
        return self._state.current_page

    @property
    def cars(self) -> list[Car]:
        return self._state.cars

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error_message(self) -> str | None:
        return self._state.error_message

    @property
    def user(self) -> User | None:
        return self._session.user

    @property
    def pending_refreshes(self) -> int:
        return len(self._background)

    # ------------------------------------------------------------------
    # Render adapters
    # ------------------------------------------------------------------

    def _render_cars(self) -> None:
        cars = self._state.cars
        self._renderer.render_cars(project_dashboard(cars), project_cars_table(cars))

    def set_loading(self, loading: bool) -> None:
        self._state.loading = loading
        self._renderer.set_loading(loading)

    def show_error(self, message: str) -> None:
        self._state.error_message = message
        self._renderer.show_error(message)

    def dismiss_error(self) -> None:
        self._state.error_message = None
        self._renderer.show_error(None)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def navigate(self, page: Page | str) -> None:
        """Switch pages and render immediately.

        For pages that display the car list a refresh is started in the
        background; this method never waits for it.
        """
        target = Page(page)
        self._state.current_page = target
        self._renderer.show_page(target, project_header(self._session.user))
        if shows_car_list(target):
            self._spawn_refresh()

    def _spawn_refresh(self) -> None:
        task = asyncio.get_running_loop().create_task(self.refresh_cars())
        self._background.add(task)
        task.add_done_callback(self._on_refresh_done)

    def _on_refresh_done(self, task: asyncio.Task[None]) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.debug("Background car refresh crashed", exc_info=exc)

    async def wait_for_refreshes(self) -> None:
        """Wait until every background refresh started so far has finished."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def refresh_cars(self) -> None:
        """Re-fetch the car list. Failures are logged and otherwise ignored."""
        token = self._session.token
        if not token:
            return
        try:
            cars = await self._api.get_cars(token)
        except CarAppError:
            _logger.debug("Car list refresh failed", exc_info=True)
            return
        if self._session.token != token:
            # Logged out (or in as someone else) while the request was out.
            _logger.debug("Dropping car list fetched with a stale token")
            return
        self._state.replace_cars(cars)
        self._render_cars()

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    async def submit_login(self, form: LoginForm) -> bool:
        """Log in with *form*; returns whether the dashboard was reached."""
        self.set_loading(True)
        try:
            await self._session.login(form.username, form.password)
        except InvalidCredentialsError:
            self.show_error(MSG_INVALID_CREDENTIALS)
        except LoginConnectionError:
            _logger.debug("Login service unreachable", exc_info=True)
            self.show_error(MSG_LOGIN_UNREACHABLE)
        except LoginUnavailableError:
            _logger.debug("Login failed", exc_info=True)
            self.show_error(MSG_LOGIN_FAILED)
        else:
            self.navigate(Page.DASHBOARD)
            return True
        finally:
            self.set_loading(False)
        return False

    async def submit_add_car(self, form: CarForm) -> bool:
        """Validate and create a car; returns whether it was created.

        A validation failure shows its message and returns before any request
        is made or the loading flag is touched.
        """
        try:
            car = validate_car_form(form)
        except CarValidationError as exc:
            self.show_error(exc.message)
            return False

        self.set_loading(True)
        try:
            await self._api.create_car(self._session.token, car)
        except CreateUnavailableError:
            _logger.debug("Car service unreachable", exc_info=True)
            self.show_error(MSG_CREATE_UNREACHABLE)
        except CreateFailedError:
            _logger.debug("Car creation rejected", exc_info=True)
            self.show_error(MSG_CREATE_FAILED)
        else:
            self._renderer.reset_form(FormName.ADD_CAR)
            self.navigate(Page.CARS)
            return True
        finally:
            self.set_loading(False)
        return False

    def logout(self) -> None:
        self._session.logout()
        self._state.clear_cars()
        self._render_cars()
        self.navigate(Page.LOGIN)

    async def check_auth_status(self) -> None:
        """Startup: verify a stored token and land on the matching page."""
        if not self._session.token:
            self.navigate(Page.LOGIN)
            return
        try:
            await self._session.probe()
        except NoTokenError:
            self.navigate(Page.LOGIN)
            return
        except InvalidSessionError:
            self.logout()
            return
        self.navigate(Page.DASHBOARD)
