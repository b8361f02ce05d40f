"""Fixtures for route tests: the routers mounted on a bare app."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from trackboard.api.app import register_exception_handlers
from trackboard.api.dependencies import get_state_store
from trackboard.api.routes import comments, projects, tickets
from trackboard.state_store import StateStore


@pytest.fixture
def store():
    """Create an in-memory StateStore."""
    s = StateStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def app(store: StateStore) -> FastAPI:
    """Create a test FastAPI app using the in-memory store."""
    app = FastAPI()

    def override_get_state_store():
        yield store

    app.dependency_overrides[get_state_store] = override_get_state_store
    register_exception_handlers(app)
    app.include_router(projects.router, prefix="/api/v1")
    app.include_router(tickets.router, prefix="/api/v1")
    app.include_router(comments.router, prefix="/api/v1")
    return app


@pytest.fixture
def client(app: FastAPI):
    """Create a test client."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def project_id(store: StateStore) -> str:
    return store.create_project(name="Board", description="Main board").id
