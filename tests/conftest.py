"""
Pytest fixtures: an in-memory database per test and a TestClient wired to it.
"""

import pytest
from fastapi.testclient import TestClient

from database.database import Database, get_db
from main import app


@pytest.fixture
def database():
    database = Database("sqlite://")
    database.connect()
    yield database
    database.disconnect()


@pytest.fixture
def db(database):
    """Session for calling repository functions directly."""
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def client(database):
    def override_get_db():
        session = database.session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, email="ada@example.com", password="s3cret-pass", name="Ada"):
    response = client.post("/api/auth/register", json={"email": email, "password": password, "name": name})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(client):
    token = register(client)["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(client):
    token = register(client, email="grace@example.com", name="Grace")["token"]
    return {"Authorization": f"Bearer {token}"}
