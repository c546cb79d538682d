"""Pytest configuration and fixtures."""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from api import create_app
from models import storage


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


class FrozenClock:
    """Injectable clock for TokenService; advances only when told to."""

    def __init__(self, now=None):
        self.now = now or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def make_app(tmp_path, **overrides):
    config = {"DATABASE_URL": f"sqlite:///{tmp_path / 'test.db'}"}
    config.update(overrides)
    return create_app("testing", overrides=config)


@pytest.fixture
def app(tmp_path):
    app = make_app(tmp_path)
    yield app
    storage.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def token_service(app):
    return app.extensions["token_service"]


@pytest.fixture
def register(client):
    """Register a user through the API and return its ids, tokens and auth header."""
    def _register(username="testuser", email="test@test.com", password="testpass"):
        response = client.post(
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 201, response.get_json()
        body = response.get_json()
        return SimpleNamespace(
            id=body["user"]["id"],
            username=username,
            email=email,
            password=password,
            access_token=body["access_token"],
            refresh_token=body["refresh_token"],
            headers=auth_header(body["access_token"]),
        )

    return _register


@pytest.fixture
def user(register):
    return register()


@pytest.fixture
def other_user(register):
    return register(username="otheruser", email="other@test.com", password="otherpass")
