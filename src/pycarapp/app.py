"""Top-level controller wiring client, session and view together."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pycarapp.client import CarClient
from pycarapp.config import CarAppConfig
from pycarapp.exceptions import CarAppError
from pycarapp.models.forms import CarForm, LoginForm
from pycarapp.render import Renderer
from pycarapp.session import SessionController
from pycarapp.state.pages import Page
from pycarapp.storage import TokenStorage, storage_from_config
from pycarapp.view import ViewStateMachine

_logger = logging.getLogger(__name__)

ActionHandler = Callable[..., Awaitable[Any]]


def _as_login_form(value: LoginForm | Mapping[str, Any]) -> LoginForm:
    return value if isinstance(value, LoginForm) else LoginForm.from_mapping(value)


def _as_car_form(value: CarForm | Mapping[str, Any]) -> CarForm:
    return value if isinstance(value, CarForm) else CarForm.from_mapping(value)


class CarApp:
    """The client application.

    Owns the whole application state explicitly: the :class:`CarClient`, the
    :class:`SessionController` and the :class:`ViewStateMachine`. User
    interface events reach it through :meth:`dispatch`.

    Usage::

        async with CarApp(config, renderer=my_renderer) as app:
            await app.start()
            await app.dispatch("submit-login", form={"username": "alice", "password": "pw"})
            await app.dispatch("nav", page="cars")
    """

    def __init__(
        self,
        config: CarAppConfig | None = None,
        *,
        renderer: Renderer | None = None,
        storage: TokenStorage | None = None,
        client: CarClient | None = None,
    ) -> None:
        self._config = config or CarAppConfig()
        self._client = client or CarClient(self._config)
        self._storage = storage if storage is not None else storage_from_config(self._config)
        self.session = SessionController(
            self._client,
            self._storage,
            storage_key=self._config.token_storage_key,
        )
        self.view = ViewStateMachine(self.session, self._client, renderer=renderer)
        self._actions: dict[str, ActionHandler] = {
            "nav": self._on_nav,
            "logout": self._on_logout,
            "submit-login": self._on_submit_login,
            "submit-add-car": self._on_submit_add_car,
            "dismiss-error": self._on_dismiss_error,
        }

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CarApp:
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.view.wait_for_refreshes()
        await self._client.__aexit__(*exc)

    async def start(self) -> None:
        """Pick the initial page from the stored token (probing it if present)."""
        await self.view.check_auth_status()
        _logger.debug("Started on page=%s state=%s", self.view.current_page, self.session.auth_state)

    # ------------------------------------------------------------------
    # Action dispatch
    # ------------------------------------------------------------------

    @property
    def actions(self) -> frozenset[str]:
        return frozenset(self._actions)

    async def dispatch(self, action: str, **payload: Any) -> Any:
        """Run the handler registered for *action*.

        Raises
        ------
        CarAppError
            If *action* is not a known action name.
        """
        handler = self._actions.get(action)
        if handler is None:
            raise CarAppError(f"Unknown action {action!r}; expected one of {sorted(self._actions)}")
        _logger.debug("Dispatch %s", action)
        return await handler(**payload)

    async def _on_nav(self, page: Page | str) -> None:
        try:
            target = Page(page)
        except ValueError as exc:
            raise CarAppError(f"Unknown page {page!r}") from exc
        self.view.navigate(target)

    async def _on_logout(self) -> None:
        self.view.logout()

    async def _on_submit_login(self, form: LoginForm | Mapping[str, Any]) -> bool:
        return await self.view.submit_login(_as_login_form(form))

    async def _on_submit_add_car(self, form: CarForm | Mapping[str, Any]) -> bool:
        return await self.view.submit_add_car(_as_car_form(form))

    async def _on_dismiss_error(self) -> None:
        self.view.dismiss_error()
