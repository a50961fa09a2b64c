"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT
- JTI generation for token identifiers

Access and refresh tokens are signed with separate secrets and lifetimes
(ACCESS_TOKEN_* / REFRESH_TOKEN_* in the app config).
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError

from flask import current_app

ph = PasswordHasher()

TOKEN_TYPES = ("access", "refresh")


class InvalidTokenError(Exception):
    """Raised when a token is malformed, expired, of the wrong type or badly signed."""


class TokenExpiredError(InvalidTokenError):
    pass


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False

def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())

def _now() -> datetime:
    return datetime.now(timezone.utc)

def _key_for(token_type: str) -> str:
    if token_type not in TOKEN_TYPES:
        raise ValueError(f"Unknown token type: {token_type}")
    return current_app.config[f"{token_type.upper()}_TOKEN_SECRET"]

def _create_token(subject: str, token_type: str, jti: str | None = None) -> str:
    now = _now()
    exp = now + current_app.config[f"{token_type.upper()}_TOKEN_EXPIRES"]
    payload = {
        "iss": current_app.config.get("JWT_ISSUER", "user-accounts-api"),
        "sub": str(subject),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
        "type": token_type,
        "jti": jti or generate_jti(),
    }
    return jwt.encode(payload, _key_for(token_type), algorithm=current_app.config["JWT_ALGORITHM"])

def create_access_token(subject: str, jti: str | None = None) -> str:
    """Sign a short-lived access token for `subject` (a user id)."""
    return _create_token(subject, "access", jti)

def create_refresh_token(subject: str, jti: str | None = None) -> str:
    """Sign a long-lived refresh token for `subject` (a user id)."""
    return _create_token(subject, "refresh", jti)

def decode_token(token: str, expected_type: str = "access") -> Dict[str, Any]:
    """
    Decode and validate a JWT. Raises InvalidTokenError on invalid signature/expired jwt.
    expected_type must be "access" or "refresh"; it also selects the verification secret.
    """
    try:
        decoded = jwt.decode(
            token,
            _key_for(expected_type),
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            issuer=current_app.config.get("JWT_ISSUER", "user-accounts-api"),
            options={"require": ["exp", "iss", "sub", "type"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError("Token expired")
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError(f"Invalid token: {exc}")

    if decoded.get("type") != expected_type:
        raise InvalidTokenError("Wrong token type")
    return decoded

def verify_access_token(token: str) -> str:
    """Return the user id bound to a valid access token."""
    return decode_token(token, expected_type="access")["sub"]

def verify_refresh_token(token: str) -> str:
    """Return the user id bound to a valid refresh token."""
    return decode_token(token, expected_type="refresh")["sub"]
