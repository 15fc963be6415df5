"""Web test fixtures: TestClient with shared in-memory SQLite."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from carservice.repositories.sqlalchemy import SQLAlchemyBillRepository
from carservice.security import create_access_token
from carservice.services.bill_service import BillService
from tests.conftest import _sample_bill_create, create_schema


def _make_test_engine():
    """Create a fresh in-memory SQLite engine with shared connection pool."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with engine.connect() as conn:
        create_schema(conn)
    return engine


def create_bill_in_db(engine, created_by="staff-1", **overrides):
    """Create a bill through the service. Shared helper for web route tests."""
    with engine.connect() as conn:
        service = BillService(SQLAlchemyBillRepository(conn))
        bill = service.create_bill(_sample_bill_create(**overrides), created_by)
    return bill


@pytest.fixture(autouse=True)
def web_test_db(monkeypatch):
    """Set up in-memory DB and patch the web app to use it."""
    engine = _make_test_engine()

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_engine", lambda: engine)

    import web.app as app_module

    monkeypatch.setattr(app_module, "initialize_db", lambda: None)
    monkeypatch.setattr(app_module, "dispose_engine", lambda: None)

    from carservice.settings import settings

    monkeypatch.setattr(settings, "jwt_secret", "test-secret")
    monkeypatch.setattr(settings, "jwt_algorithm", "HS256")

    yield engine

    engine.dispose()


@pytest.fixture()
def test_engine(web_test_db):
    """Expose the test engine for helpers that need direct DB access."""
    return web_test_db


@pytest.fixture()
def client():
    from starlette.testclient import TestClient

    from web.app import app

    return TestClient(app)


@pytest.fixture()
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {create_access_token('staff-1')}"}


@pytest.fixture()
def auth_client(client, auth_headers):
    """Client that sends a valid bearer token on every request."""
    client.headers.update(auth_headers)
    return client
