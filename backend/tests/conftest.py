"""Pytest fixtures: SQLite database for fast, isolated tests."""
import os

# Must be set before taskflow.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-the-taskflow-suite")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from taskflow.database import Base, get_db
from taskflow.main import app

# Import all models so they register with Base.metadata
from taskflow.models.user import User                 # noqa: F401
from taskflow.models.group import Group, GroupMember  # noqa: F401
from taskflow.models.task import Task                 # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session, closed after the test."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: register users, create groups, build auth headers
# ---------------------------------------------------------------------------
def auth_headers(user: dict) -> dict:
    return {"Authorization": f"Bearer {user['token']}"}


def register_user(client: TestClient, name: str = "Test User", email: str | None = None,
                  password: str = "secret123") -> dict:
    """Helper: POST /api/auth/register and return the user dict plus its token."""
    if email is None:
        email = f"{name.lower().replace(' ', '.')}@example.com"
    resp = client.post("/api/auth/register", json={
        "name": name,
        "email": email,
        "password": password,
    })
    assert resp.status_code == 201, resp.text
    body = resp.json()
    return {**body["user"], "token": body["token"]}


def create_test_group(client: TestClient, owner: dict, name: str = "Test Group",
                      description: str | None = None) -> dict:
    """Helper: POST /api/groups and return the group JSON."""
    payload = {"name": name}
    if description is not None:
        payload["description"] = description
    resp = client.post("/api/groups", json=payload, headers=auth_headers(owner))
    assert resp.status_code == 201, resp.text
    return resp.json()["group"]


def join_test_group(client: TestClient, user: dict, group: dict) -> dict:
    """Helper: POST /api/groups/join with the group's code."""
    resp = client.post("/api/groups/join", json={"invitation_code": group["invitation_code"]},
                       headers=auth_headers(user))
    assert resp.status_code == 200, resp.text
    return resp.json()["group"]


def roles_by_user(group: dict) -> dict:
    return {m["user"]["user_id"]: m["role"] for m in group["members"]}
