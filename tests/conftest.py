"""Shared fixtures: an isolated in-memory database, a frozen clock and API clients."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime

os.environ["EXPENSE_TRACKER_DATABASE_URL"] = "sqlite://"
os.environ["EXPENSE_TRACKER_SECRET_KEY"] = "test-secret-key"
os.environ["EXPENSE_TRACKER_DEV_MODE"] = "true"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import get_db, init_db
from main import app
from router import get_now

TEST_SECRET = "test-secret-key"
PASSWORD = "correct horse battery staple"


@dataclass
class FrozenClock:
    now: datetime


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database shared by every connection in a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    # Friday
    return FrozenClock(datetime(2024, 3, 15, 10, 0, 0))


@pytest.fixture
def client(session_factory, clock):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: clock.now
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_client(client):
    """Build additional clients that share the same overrides (one cookie jar each)."""
    def _make():
        return TestClient(app)

    return _make


def signup(client, email="ada@example.com", name="Ada", password=PASSWORD):
    response = client.post("/auth/signup", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


def login(client, email="ada@example.com", password=PASSWORD):
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def user(client):
    """Sign up and log in on ``client``; returns the user payload."""
    created = signup(client)
    login(client)
    return created


@pytest.fixture
def categories(client, user):
    return {c["name"]: c["id"] for c in client.get("/categories").json()}


def add_expense(client, category_id, amount, date, description=None):
    payload = {"amount": amount, "date": date, "categoryId": category_id}
    if description is not None:
        payload["description"] = description
    response = client.post("/expenses", json=payload)
    assert response.status_code == 200, response.text
    return response.json()
