from __future__ import annotations

import re
from datetime import timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlmodel import select

from locus_app.auth.database import init_db, session_scope
from locus_app.auth.models import User
from locus_app.auth.security import create_access_token
from locus_app.config import Settings, get_settings
from locus_app.locations.router import SLUG_CONFLICT_MESSAGE
from locus_app.slugs import SlugConflictError, SQLModelSlugStore, StoreUnavailable
from server import app


@pytest.fixture()
def make_client(tmp_path: Path):
    def _make(**overrides) -> TestClient:
        settings = Settings(
            database_url=f"sqlite:///{tmp_path / 'api.db'}",
            jwt_secret_key="test-secret",
            **overrides,
        )
        init_db(settings)
        app.dependency_overrides[get_settings] = lambda: settings
        # no context manager: startup hooks would initialise the default database
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture()
def client(make_client) -> TestClient:
    return make_client()


def _auth_headers(client: TestClient, email: str) -> dict:
    response = client.post("/auth/register", json={"email": email, "password": "correct-horse"})
    assert response.status_code == 200, response.text
    response = client.post("/auth/token", data={"username": email, "password": "correct-horse"})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _location(name: str = "Coffee Shop") -> dict:
    return {"name": name, "description": "Best espresso in town", "lat": 47.37, "long": 8.54}


def test_healthcheck(client: TestClient) -> None:
    assert client.get("/healthz").json() == {"status": "ok"}


def test_create_location_requires_authentication(client: TestClient) -> None:
    response = client.post("/locations", json=_location())

    assert response.status_code == 401


def test_create_location_returns_slug(client: TestClient) -> None:
    headers = _auth_headers(client, "ada@example.com")

    response = client.post("/locations", json=_location(), headers=headers)

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["slug"] == "coffee-shop"
    assert body["name"] == "Coffee Shop"


def test_duplicate_name_for_same_user_conflicts(client: TestClient) -> None:
    headers = _auth_headers(client, "ada@example.com")
    client.post("/locations", json=_location(), headers=headers)

    response = client.post("/locations", json=_location(), headers=headers)

    assert response.status_code == 409
    assert response.json()["detail"] == "You already have a location with this name."


def test_same_name_across_users_gets_suffixed_slug(client: TestClient) -> None:
    first = _auth_headers(client, "ada@example.com")
    second = _auth_headers(client, "grace@example.com")
    client.post("/locations", json=_location(), headers=first)

    response = client.post("/locations", json=_location(), headers=second)

    assert response.status_code == 201, response.text
    assert re.fullmatch(r"coffee-shop-[a-z0-9]{5}", response.json()["slug"])


def test_invalid_coordinates_are_rejected(client: TestClient) -> None:
    headers = _auth_headers(client, "ada@example.com")

    response = client.post("/locations", json={**_location(), "lat": 123.0}, headers=headers)

    assert response.status_code == 422


def test_exhausted_slug_resolution_is_service_unavailable(make_client) -> None:
    client = make_client(slug_max_attempts=1, slug_suffix_length=1, slug_suffix_alphabet="a")
    first = _auth_headers(client, "ada@example.com")
    second = _auth_headers(client, "grace@example.com")
    assert client.post("/locations", json=_location("Coffee Shop"), headers=first).status_code == 201
    assert client.post("/locations", json=_location("Coffee Shop A"), headers=first).status_code == 201

    response = client.post("/locations", json=_location("Coffee Shop"), headers=second)

    assert response.status_code == 503
    assert "try again" in response.json()["detail"]


def test_store_failure_is_service_unavailable(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    headers = _auth_headers(client, "ada@example.com")

    def _down(self, slug: str) -> bool:
        raise StoreUnavailable("connection refused")

    monkeypatch.setattr(SQLModelSlugStore, "exists", _down)

    response = client.post("/locations", json=_location(), headers=headers)

    assert response.status_code == 503


def test_slug_taken_at_insert_time_conflicts(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    headers = _auth_headers(client, "ada@example.com")

    def _lose_race(self, record):
        raise SlugConflictError(record.slug)

    monkeypatch.setattr(SQLModelSlugStore, "insert", _lose_race)

    response = client.post("/locations", json=_location(), headers=headers)

    assert response.status_code == 409
    assert response.json()["detail"] == SLUG_CONFLICT_MESSAGE


def test_malformed_token_is_unauthorized(client: TestClient) -> None:
    response = client.post("/locations", json=_location(), headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_expired_token_is_unauthorized(client: TestClient) -> None:
    _auth_headers(client, "ada@example.com")
    owner = User(id=1, email="ada@example.com", hashed_password="x")
    token = create_access_token(owner, Settings(jwt_secret_key="test-secret"), expires_delta=timedelta(minutes=-5))

    response = client.post("/locations", json=_location(), headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_inactive_owner_cannot_create_locations(client: TestClient) -> None:
    headers = _auth_headers(client, "ada@example.com")
    settings = app.dependency_overrides[get_settings]()
    with session_scope(settings) as session:
        owner = session.exec(select(User).where(User.email == "ada@example.com")).one()
        owner.is_active = False
        session.add(owner)
        session.commit()

    response = client.post("/locations", json=_location(), headers=headers)

    assert response.status_code == 403
