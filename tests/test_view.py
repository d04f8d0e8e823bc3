"""Tests for the view state machine."""

from __future__ import annotations

import asyncio

import pytest
from fakes import FakeCarBackend, RecordingRenderer, car_payload

from pycarapp._constants import CARS_ENDPOINT, LOGIN_ENDPOINT, ME_ENDPOINT, TOKEN_STORAGE_KEY
from pycarapp._transport import ApiResponse
from pycarapp.client import CarClient
from pycarapp.models.forms import CarForm, LoginForm
from pycarapp.render import HeaderView
from pycarapp.session import SessionController
from pycarapp.state.pages import FormName, Page
from pycarapp.storage import MemoryTokenStorage
from pycarapp.view import ViewStateMachine

TESLA = CarForm(
    name="Tesla",
    connector_types=("nacs",),
    battery_charge_limit="80",
    battery_size="75",
    max_kw_ac="11",
    max_kw_dc="250",
)


async def _logged_in(view: ViewStateMachine) -> None:
    assert await view.submit_login(LoginForm("alice", "pw")) is True
    await view.wait_for_refreshes()


# ------------------------------------------------------------------
# navigate / refresh_cars
# ------------------------------------------------------------------


class TestNavigate:
    @pytest.mark.asyncio
    async def test_renders_page_and_header_immediately(
        self,
        view: ViewStateMachine,
        renderer: RecordingRenderer,
    ) -> None:
        view.navigate(Page.ADD_CAR)

        assert view.current_page is Page.ADD_CAR
        assert renderer.pages == [Page.ADD_CAR]
        assert renderer.headers == [HeaderView(visible=False)]
        assert view.pending_refreshes == 0

    @pytest.mark.asyncio
    async def test_accepts_page_names(self, view: ViewStateMachine) -> None:
        view.navigate("add-car")
        assert view.current_page is Page.ADD_CAR

    @pytest.mark.asyncio
    async def test_unknown_page_raises(self, view: ViewStateMachine) -> None:
        with pytest.raises(ValueError):
            view.navigate("settings")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page", [Page.DASHBOARD, Page.CARS])
    async def test_list_pages_refresh_in_background(
        self,
        view: ViewStateMachine,
        backend: FakeCarBackend,
        renderer: RecordingRenderer,
        page: Page,
    ) -> None:
        await _logged_in(view)
        backend.cars = [car_payload("EV6")]
        backend.list_gate = asyncio.Event()
        before = backend.count("GET", CARS_ENDPOINT)

        view.navigate(page)

        # Navigation returned and rendered while the fetch is still held.
        assert renderer.pages[-1] is page
        assert view.pending_refreshes == 1
        await asyncio.sleep(0)
        assert [car.name for car in view.cars] == []

        backend.list_gate.set()
        await view.wait_for_refreshes()

        assert backend.count("GET", CARS_ENDPOINT) == before + 1
        assert [car.name for car in view.cars] == ["EV6"]
        assert renderer.tables[-1].rows[0].name == "EV6"

    @pytest.mark.asyncio
    async def test_add_car_page_does_not_refresh(self, view: ViewStateMachine, backend: FakeCarBackend) -> None:
        await _logged_in(view)
        before = backend.count("GET", CARS_ENDPOINT)
        view.navigate(Page.ADD_CAR)
        await view.wait_for_refreshes()
        assert backend.count("GET", CARS_ENDPOINT) == before

    @pytest.mark.asyncio
    async def test_cars_kept_when_navigating_away(self, view: ViewStateMachine, backend: FakeCarBackend) -> None:
        backend.cars = [car_payload("EV6")]
        await _logged_in(view)
        view.navigate(Page.ADD_CAR)
        assert [car.name for car in view.cars] == ["EV6"]


class TestRefreshCars:
    @pytest.mark.asyncio
    async def test_no_token_is_noop(self, view: ViewStateMachine, backend: FakeCarBackend) -> None:
        await view.refresh_cars()
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_replaces_list_wholesale_in_server_order(
        self,
        view: ViewStateMachine,
        backend: FakeCarBackend,
    ) -> None:
        await _logged_in(view)
        backend.cars = [car_payload("B"), car_payload("A")]
        await view.refresh_cars()
        assert [car.name for car in view.cars] == ["B", "A"]

        backend.cars = [car_payload("C")]
        await view.refresh_cars()
        assert [car.name for car in view.cars] == ["C"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failure", ["status", "network"])
    async def test_failure_keeps_cars_and_shows_nothing(
        self,
        view: ViewStateMachine,
        backend: FakeCarBackend,
        renderer: RecordingRenderer,
        failure: str,
    ) -> None:
        backend.cars = [car_payload("EV6")]
        await _logged_in(view)
        renders = len(renderer.tables)

        if failure == "status":
            backend.list_status = 500
        else:
            backend.unreachable.add(CARS_ENDPOINT)
        await view.refresh_cars()

        assert [car.name for car in view.cars] == ["EV6"]
        assert len(renderer.tables) == renders
        assert view.error_message is None
        assert renderer.errors == []

    @pytest.mark.asyncio
    async def test_result_dropped_after_logout(
        self,
        view: ViewStateMachine,
        backend: FakeCarBackend,
    ) -> None:
        await _logged_in(view)
        backend.cars = [car_payload("EV6")]
        backend.list_gate = asyncio.Event()

        view.navigate(Page.CARS)
        await asyncio.sleep(0)
        view.logout()
        backend.list_gate.set()
        await view.wait_for_refreshes()

        assert view.cars == []
        assert view.current_page is Page.LOGIN


# ------------------------------------------------------------------
# submit_login
# ------------------------------------------------------------------


class TestSubmitLogin:
    @pytest.mark.asyncio
    async def test_success(
        self,
        view: ViewStateMachine,
        backend: FakeCarBackend,
        storage: MemoryTokenStorage,
        renderer: RecordingRenderer,
    ) -> None:
        ok = await view.submit_login(LoginForm("alice", "pw"))
        await view.wait_for_refreshes()

        assert ok is True
        assert storage.get(TOKEN_STORAGE_KEY) == "t1"
        assert view.current_page is Page.DASHBOARD
        assert view.user is not None and view.user.username == "alice"
        assert renderer.headers[-1] == HeaderView(visible=True, username="alice")
        assert backend.count("GET", CARS_ENDPOINT) == 1
        assert renderer.loading == [True, False]
        assert view.loading is False

    @pytest.mark.asyncio
    async def test_invalid_credentials(
        self,
        view: ViewStateMachine,
        storage: MemoryTokenStorage,
        renderer: RecordingRenderer,
    ) -> None:
        ok = await view.submit_login(LoginForm("alice", "wrong"))

        assert ok is False
        assert view.error_message == "Invalid credentials"
        assert renderer.errors == ["Invalid credentials"]
        assert storage.get(TOKEN_STORAGE_KEY) is None
        assert view.current_page is Page.LOGIN
        assert renderer.pages == []
        assert renderer.loading == [True, False]

    @pytest.mark.asyncio
    async def test_http_error(self, view: ViewStateMachine, backend: FakeCarBackend) -> None:
        backend.login_status = 500
        assert await view.submit_login(LoginForm("alice", "pw")) is False
        assert view.error_message == "Login failed"
        assert view.loading is False

    @pytest.mark.asyncio
    async def test_unreachable(self, view: ViewStateMachine, backend: FakeCarBackend) -> None:
        backend.unreachable.add(LOGIN_ENDPOINT)
        assert await view.submit_login(LoginForm("alice", "pw")) is False
        assert view.error_message == "Unable to connect to login service"
        assert view.loading is False

    @pytest.mark.asyncio
    async def test_unreadable_success_body_reads_as_unreachable(
        self,
        view: ViewStateMachine,
        backend: FakeCarBackend,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def no_json(*_args: object, **_kwargs: object) -> ApiResponse:
            return ApiResponse(200)

        monkeypatch.setattr(backend, "request", no_json)

        assert await view.submit_login(LoginForm("alice", "pw")) is False
        assert view.error_message == "Unable to connect to login service"
        assert view.current_page is Page.LOGIN
        assert view.loading is False

    @pytest.mark.asyncio
    async def test_loading_cleared_on_unexpected_error(
        self,
        session: SessionController,
        client: CarClient,
        renderer: RecordingRenderer,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def boom(*_args: object) -> None:
            raise RuntimeError("boom")

        monkeypatch.setattr(session, "login", boom)
        view = ViewStateMachine(session, client, renderer=renderer)

        with pytest.raises(RuntimeError):
            await view.submit_login(LoginForm("alice", "pw"))
        assert view.loading is False
        assert renderer.loading == [True, False]

    @pytest.mark.asyncio
    async def test_loading_true_while_outstanding(self, view: ViewStateMachine, backend: FakeCarBackend) -> None:
        seen: list[bool] = []
        original = backend.request

        async def observing_request(*args: object, **kwargs: object):  # type: ignore[no-untyped-def]
            seen.append(view.loading)
            return await original(*args, **kwargs)  # type: ignore[arg-type]

        backend.request = observing_request  # type: ignore[method-assign]
        await view.submit_login(LoginForm("alice", "pw"))
        await view.wait_for_refreshes()

        assert seen[0] is True
        assert view.loading is False


# ------------------------------------------------------------------
# submit_add_car
# ------------------------------------------------------------------


class TestSubmitAddCar:
    @pytest.mark.asyncio
    async def test_success(
        self,
        view: ViewStateMachine,
        backend: FakeCarBackend,
        renderer: RecordingRenderer,
    ) -> None:
        await _logged_in(view)
        fetches = backend.count("GET", CARS_ENDPOINT)
        renderer.loading.clear()

        ok = await view.submit_add_car(TESLA)
        await view.wait_for_refreshes()

        assert ok is True
        assert backend.posted == [
            {
                "name": "Tesla",
                "connector_types": ["nacs"],
                "battery_charge_limit": 80,
                "battery_size": 75,
                "max_kw_ac": 11,
                "max_kw_dc": 250,
            }
        ]
        assert renderer.resets == [FormName.ADD_CAR]
        assert view.current_page is Page.CARS
        assert backend.count("GET", CARS_ENDPOINT) == fetches + 1
        assert [car.name for car in view.cars] == ["Tesla"]
        assert renderer.tables[-1].rows[0].connectors == "nacs"
        assert renderer.loading == [True, False]

    @pytest.mark.asyncio
    async def test_validation_failure_makes_no_request(
        self,
        view: ViewStateMachine,
        backend: FakeCarBackend,
        renderer: RecordingRenderer,
    ) -> None:
        await _logged_in(view)
        calls = len(backend.calls)
        renderer.loading.clear()
        bad = CarForm(
            name="Tesla",
            battery_charge_limit="0",
            battery_size="75",
            max_kw_ac="11",
            max_kw_dc="250",
        )

        ok = await view.submit_add_car(bad)

        assert ok is False
        assert view.error_message == "Input should be greater than 0"
        assert len(backend.calls) == calls
        assert renderer.loading == []
        assert view.current_page is Page.DASHBOARD

    @pytest.mark.asyncio
    async def test_first_invalid_field_is_reported(self, view: ViewStateMachine) -> None:
        bad = CarForm(name="X", battery_charge_limit="101", battery_size="0", max_kw_ac="0", max_kw_dc="0")
        await view.submit_add_car(bad)
        assert view.error_message == "Input should be less than or equal to 100"

    @pytest.mark.asyncio
    async def test_http_failure(
        self,
        view: ViewStateMachine,
        backend: FakeCarBackend,
        renderer: RecordingRenderer,
    ) -> None:
        await _logged_in(view)
        backend.create_status = 422

        assert await view.submit_add_car(TESLA) is False
        assert view.error_message == "Failed to add car"
        assert renderer.resets == []
        assert view.current_page is Page.DASHBOARD
        assert view.loading is False

    @pytest.mark.asyncio
    async def test_network_failure(self, view: ViewStateMachine, backend: FakeCarBackend) -> None:
        await _logged_in(view)
        backend.unreachable.add(CARS_ENDPOINT)

        assert await view.submit_add_car(TESLA) is False
        assert view.error_message == "Unable to add car"
        assert view.loading is False

    @pytest.mark.asyncio
    async def test_without_session_the_service_rejects(self, view: ViewStateMachine, backend: FakeCarBackend) -> None:
        assert await view.submit_add_car(TESLA) is False
        assert view.error_message == "Failed to add car"
        assert backend.count("POST", CARS_ENDPOINT) == 1

    @pytest.mark.asyncio
    async def test_concurrent_submissions_are_not_deduplicated(
        self,
        view: ViewStateMachine,
        backend: FakeCarBackend,
    ) -> None:
        await _logged_in(view)
        results = await asyncio.gather(view.submit_add_car(TESLA), view.submit_add_car(TESLA))
        await view.wait_for_refreshes()

        assert results == [True, True]
        assert backend.count("POST", CARS_ENDPOINT) == 2
        assert len(view.cars) == 2


# ------------------------------------------------------------------
# logout / check_auth_status
# ------------------------------------------------------------------


class TestLogout:
    @pytest.mark.asyncio
    async def test_clears_everything(
        self,
        view: ViewStateMachine,
        backend: FakeCarBackend,
        storage: MemoryTokenStorage,
        renderer: RecordingRenderer,
    ) -> None:
        backend.cars = [car_payload("EV6")]
        await _logged_in(view)

        view.logout()

        assert view.cars == []
        assert view.user is None
        assert storage.get(TOKEN_STORAGE_KEY) is None
        assert view.current_page is Page.LOGIN
        assert renderer.headers[-1] == HeaderView(visible=False)
        assert renderer.tables[-1].show_empty

    @pytest.mark.asyncio
    async def test_twice_matches_once(self, view: ViewStateMachine) -> None:
        await _logged_in(view)
        view.logout()
        once = (view.current_page, view.cars, view.user, view.state.loading)
        view.logout()
        assert (view.current_page, view.cars, view.user, view.state.loading) == once


class TestCheckAuthStatus:
    @pytest.mark.asyncio
    async def test_without_token_goes_to_login(self, view: ViewStateMachine, backend: FakeCarBackend) -> None:
        await view.check_auth_status()
        assert view.current_page is Page.LOGIN
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_valid_stored_token_goes_to_dashboard(
        self,
        client: CarClient,
        backend: FakeCarBackend,
        renderer: RecordingRenderer,
    ) -> None:
        token = backend.issue_token("alice")
        backend.cars = [car_payload("EV6")]
        session = SessionController(client, MemoryTokenStorage({TOKEN_STORAGE_KEY: token}))
        view = ViewStateMachine(session, client, renderer=renderer)

        await view.check_auth_status()
        await view.wait_for_refreshes()

        assert view.current_page is Page.DASHBOARD
        assert renderer.headers[-1] == HeaderView(visible=True, username="alice")
        assert renderer.dashboards[-1].car_names == ("EV6",)

    @pytest.mark.asyncio
    async def test_invalid_stored_token_is_cleared(
        self,
        client: CarClient,
        backend: FakeCarBackend,
    ) -> None:
        storage = MemoryTokenStorage({TOKEN_STORAGE_KEY: "expired"})
        session = SessionController(client, storage)
        view = ViewStateMachine(session, client)

        await view.check_auth_status()

        assert backend.count("GET", ME_ENDPOINT) == 1
        assert storage.get(TOKEN_STORAGE_KEY) is None
        assert view.current_page is Page.LOGIN
        assert view.error_message is None


class TestErrorSlot:
    @pytest.mark.asyncio
    async def test_dismiss(self, view: ViewStateMachine, renderer: RecordingRenderer) -> None:
        await view.submit_login(LoginForm("alice", "wrong"))
        view.dismiss_error()
        assert view.error_message is None
        assert renderer.errors == ["Invalid credentials", None]
