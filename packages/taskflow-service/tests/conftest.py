"""Service test fixtures backed by the in-memory store."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Make _helpers importable from test files
sys.path.insert(0, str(Path(__file__).parent))

from _helpers import DEFAULT_PASSWORD, make_settings  # noqa: E402

from taskflow_service.auth.tokens import TokenService  # noqa: E402
from taskflow_service.authz.engine import AuthorizationEngine  # noqa: E402
from taskflow_service.db.memory import InMemoryStore  # noqa: E402
from taskflow_service.rest.app import create_app  # noqa: E402
from taskflow_service.services.admin import AdminService  # noqa: E402
from taskflow_service.services.projects import ProjectService  # noqa: E402
from taskflow_service.services.tasks import TaskService  # noqa: E402
from taskflow_service.settings import Settings  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def tokens(settings: Settings) -> TokenService:
    return TokenService(settings)


@pytest.fixture
def authz(store: InMemoryStore) -> AuthorizationEngine:
    return AuthorizationEngine(store, store)


@pytest.fixture
def project_service(store: InMemoryStore, authz: AuthorizationEngine) -> ProjectService:
    return ProjectService(store, store, authz)


@pytest.fixture
def task_service(store: InMemoryStore, authz: AuthorizationEngine) -> TaskService:
    return TaskService(store, store, authz)


@pytest.fixture
def admin_service(store: InMemoryStore, authz: AuthorizationEngine) -> AdminService:
    return AdminService(store, store, authz)


@pytest.fixture
def client(settings: Settings, store: InMemoryStore) -> TestClient:
    """Test client over the in-memory store (no database needed)."""
    return TestClient(create_app(settings, store=store))


@pytest.fixture
def register(client: TestClient):
    """Register a user over HTTP and return the auth response body."""

    def _register(email: str, name: str = "Alice", password: str = DEFAULT_PASSWORD) -> dict:
        resp = client.post(
            "/api/auth/register", json={"email": email, "password": password, "name": name}
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _register
