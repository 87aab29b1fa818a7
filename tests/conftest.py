"""
Pytest configuration and fixtures for the commitment tracker tests.

Every test gets its own in-memory goal store wired into the app through a
dependency override, so tests never share goals.
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from commitment.client.api import GoalApiClient
from commitment.client.state import LocalStorage
from commitment.client.tracker import CommitmentTracker
from commitment.goals.storage import MemoryGoalStorage, SqliteGoalStorage
from commitment.main import app, get_storage


@pytest.fixture
def storage() -> MemoryGoalStorage:
    return MemoryGoalStorage()


@pytest.fixture(params=["memory", "sqlite"])
def any_storage(request, tmp_path):
    """Each storage backend in turn."""
    if request.param == "memory":
        return MemoryGoalStorage()
    return SqliteGoalStorage(str(tmp_path / "goals.db"))


@pytest.fixture
def client(storage) -> Generator[TestClient, None, None]:
    """Test client for the FastAPI app, backed by the `storage` fixture."""
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def local_storage(tmp_path) -> LocalStorage:
    return LocalStorage(str(tmp_path / "client_state.json"))


@pytest.fixture
def api(client) -> GoalApiClient:
    """API client routed in-process through the test client."""
    return GoalApiClient("http://testserver", session=client)


@pytest.fixture
def tracker(api, local_storage) -> CommitmentTracker:
    return CommitmentTracker(api, local_storage)
