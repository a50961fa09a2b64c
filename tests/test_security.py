from __future__ import annotations

from datetime import timedelta

import jwt
import pytest

from utils.security import (
    InvalidTokenError,
    TokenExpiredError,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_access_token,
    verify_password,
    verify_refresh_token,
)


def test_password_hash_is_not_plaintext_and_verifies():
    hashed = hash_password("password1")
    assert hashed != "password1"
    assert verify_password("password1", hashed) is True
    assert verify_password("password2", hashed) is False


def test_verify_password_with_garbage_hash_is_false():
    assert verify_password("password1", "not-an-argon2-hash") is False


def test_tokens_bind_user_id_and_type(app):
    with app.app_context():
        access = create_access_token("user-1")
        refresh = create_refresh_token("user-1")
        assert verify_access_token(access) == "user-1"
        assert verify_refresh_token(refresh) == "user-1"
        claims = decode_token(refresh, expected_type="refresh")
        assert claims["type"] == "refresh"
        assert claims["iss"] == "user-accounts-api"


def test_each_token_is_unique(app):
    with app.app_context():
        assert create_refresh_token("user-1") != create_refresh_token("user-1")
        assert create_access_token("user-1") != create_access_token("user-1")


def test_access_token_is_not_a_refresh_token(app):
    # different secrets, so the signature check fails before the type check
    with app.app_context():
        access = create_access_token("user-1")
        with pytest.raises(InvalidTokenError):
            verify_refresh_token(access)
        refresh = create_refresh_token("user-1")
        with pytest.raises(InvalidTokenError):
            verify_access_token(refresh)


def test_wrong_type_with_same_secret_is_rejected(app):
    app.config["REFRESH_TOKEN_SECRET"] = app.config["ACCESS_TOKEN_SECRET"]
    with app.app_context():
        access = create_access_token("user-1")
        with pytest.raises(InvalidTokenError, match="Wrong token type"):
            verify_refresh_token(access)


def test_expired_token_raises_expired(app):
    app.config["REFRESH_TOKEN_EXPIRES"] = timedelta(seconds=-30)
    with app.app_context():
        token = create_refresh_token("user-1")
        with pytest.raises(TokenExpiredError):
            verify_refresh_token(token)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_tokens_are_invalid(app, token):
    with app.app_context():
        with pytest.raises(InvalidTokenError):
            verify_refresh_token(token)


def test_tampered_signature_is_invalid(app):
    with app.app_context():
        forged = jwt.encode(
            {"sub": "user-1", "type": "refresh", "exp": 9999999999},
            "some-other-secret-0123456789abcdef0123",
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            verify_refresh_token(forged)


def test_foreign_issuer_is_rejected(app):
    with app.app_context():
        foreign = jwt.encode(
            {"iss": "someone-else", "sub": "user-1", "type": "refresh", "exp": 9999999999},
            app.config["REFRESH_TOKEN_SECRET"],
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            verify_refresh_token(foreign)

        missing_iss = jwt.encode(
            {"sub": "user-1", "type": "refresh", "exp": 9999999999},
            app.config["REFRESH_TOKEN_SECRET"],
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            verify_refresh_token(missing_iss)
