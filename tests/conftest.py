from __future__ import annotations

import pytest
from fakes import FakeCarBackend, RecordingRenderer

from pycarapp.client import CarClient
from pycarapp.config import CarAppConfig
from pycarapp.session import SessionController
from pycarapp.storage import MemoryTokenStorage
from pycarapp.view import ViewStateMachine


@pytest.fixture
def backend() -> FakeCarBackend:
    return FakeCarBackend()


@pytest.fixture
def storage() -> MemoryTokenStorage:
    return MemoryTokenStorage()


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def client(backend: FakeCarBackend) -> CarClient:
    return CarClient(CarAppConfig(), transport=backend)


@pytest.fixture
def session(client: CarClient, storage: MemoryTokenStorage) -> SessionController:
    return SessionController(client, storage)


@pytest.fixture
def view(session: SessionController, client: CarClient, renderer: RecordingRenderer) -> ViewStateMachine:
    return ViewStateMachine(session, client, renderer=renderer)
