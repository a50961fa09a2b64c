from __future__ import annotations

from conftest import response_cookies

from models import user_store

LOGOUT_URL = "/api/v1/users/logout"


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_logout_clears_stored_token_and_cookies(app, client, register):
    data = register().get_json()["data"]

    resp = client.post(LOGOUT_URL, headers=_bearer(data["accessToken"]))
    assert resp.status_code == 200
    body = resp.get_json()
    assert body == {
        "statusCode": 200,
        "data": {},
        "message": "User logged out successfully",
        "success": True,
    }

    cookies = response_cookies(resp)
    for name in ("accessToken", "refreshToken"):
        assert cookies[name].startswith(f"{name}=;")
        assert "Max-Age=0" in cookies[name]

    with app.app_context():
        assert user_store.find_by_email("a@x.com").refresh_token is None


def test_refresh_after_logout_fails(client, register):
    data = register().get_json()["data"]
    client.post(LOGOUT_URL, headers=_bearer(data["accessToken"]))

    resp = client.post("/api/v1/users/refresh", json={"refreshToken": data["refreshToken"]})
    assert resp.status_code == 401


def test_logout_is_idempotent(client, register):
    access = register().get_json()["data"]["accessToken"]
    assert client.post(LOGOUT_URL, headers=_bearer(access)).status_code == 200
    # the access token is not persisted, so it stays valid until it expires
    assert client.post(LOGOUT_URL, headers=_bearer(access)).status_code == 200


def test_logout_requires_access_token(client):
    assert client.post(LOGOUT_URL).status_code == 401


def test_login_after_logout_starts_a_new_session(client, register, login):
    data = register().get_json()["data"]
    client.post(LOGOUT_URL, headers=_bearer(data["accessToken"]))

    fresh = login().get_json()["data"]["refreshToken"]
    assert client.post("/api/v1/users/refresh", json={"refreshToken": fresh}).status_code == 200
