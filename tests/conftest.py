from __future__ import annotations

from datetime import timedelta

import pytest

from api import create_app
from models import storage


def make_app(tmp_path, **overrides):
    config = {
        "DATABASE_URL": f"sqlite:///{tmp_path / 'accounts.db'}",
        "ACCESS_TOKEN_SECRET": "test-access-secret-0123456789abcdef0123",
        "REFRESH_TOKEN_SECRET": "test-refresh-secret-0123456789abcdef012",
        "ACCESS_TOKEN_EXPIRES": timedelta(minutes=15),
        "REFRESH_TOKEN_EXPIRES": timedelta(days=10),
        "COOKIE_SECURE": True,
    }
    config.update(overrides)
    return create_app("testing", config)


def response_cookies(resp) -> dict[str, str]:
    """Raw Set-Cookie headers keyed by cookie name."""
    cookies = {}
    for header in resp.headers.getlist("Set-Cookie"):
        name = header.split("=", 1)[0]
        cookies[name] = header
    return cookies


def cookie_value(resp, name: str) -> str:
    header = response_cookies(resp)[name]
    return header.split(";", 1)[0].split("=", 1)[1]


@pytest.fixture
def app(tmp_path):
    app = make_app(tmp_path)
    yield app
    storage.close()


@pytest.fixture
def client(app):
    # cookies are passed explicitly so each test controls what the server sees
    return app.test_client(use_cookies=False)


@pytest.fixture
def register(client):
    def _register(name="Alice", email="a@x.com", password="password1"):
        return client.post(
            "/api/v1/users/register",
            json={"name": name, "email": email, "password": password},
        )

    return _register


@pytest.fixture
def login(client):
    def _login(email="a@x.com", password="password1"):
        return client.post("/api/v1/users/login", json={"email": email, "password": password})

    return _login
