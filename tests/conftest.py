# tests/conftest.py
# PURPOSE: temp SQLite database per test, DB dependency override, TestClient,
# and helpers to register/login users through the real endpoints.

import os
import tempfile
from typing import Callable, Dict

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from task_manager.db import Base, enable_sqlite_foreign_keys  # DB metadata
from task_manager import db_models  # noqa: F401  (register tables)
from task_manager.main import app  # FastAPI app
from task_manager.rate_limit import reset_limits
from task_manager.store_db import get_db  # app dependency to override
from task_manager import store_db


@pytest.fixture()
def session_factory():
    # 1) Create a temporary SQLite file (so data is isolated per test)
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    tmp.close()

    # 2) Engine + session factory bound to it, with FK enforcement on
    engine = create_engine(f"sqlite:///{tmp.name}", connect_args={"check_same_thread": False})
    enable_sqlite_foreign_keys(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # 3) Create tables
    Base.metadata.create_all(bind=engine)

    yield TestingSessionLocal

    # 4) Cleanup: drop tables, dispose engine, delete temp file
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    os.unlink(tmp.name)


@pytest.fixture()
def db_session(session_factory):
    """A plain session for service-level tests."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_user(db_session) -> Callable[..., int]:
    """Insert a user directly (no HTTP) and return its id."""

    def _make(user_name: str = "alice", name: str = "Alice") -> int:
        user = store_db.create_user(db_session, name=name, user_name=user_name, password_hash="x")
        db_session.commit()
        return user.id

    return _make


def _client_for(session_factory, **kwargs):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    reset_limits()
    return TestClient(app, **kwargs)


@pytest.fixture()
def client(session_factory):
    with _client_for(session_factory) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def lenient_client(session_factory):
    """Client that returns 500 responses instead of re-raising server errors."""
    with _client_for(session_factory, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


def register_and_login(client, user_name: str, password: str = "secret-123", prefix: str = "") -> Dict[str, str]:
    """Register a user, log in, and return Authorization headers."""
    r = client.post(
        f"{prefix}/user/register",
        json={"name": user_name.title(), "userName": user_name, "password": password},
    )
    assert r.status_code == 200, r.text
    r = client.post(f"{prefix}/user/login", json={"userName": user_name, "password": password})
    assert r.status_code == 200, r.text
    token = r.json()["body"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers(client) -> Dict[str, str]:
    return register_and_login(client, "alice")
