"""
Session lifecycle: register, login, logout and refresh-token rotation.

Every successful register/login/refresh issues a fresh access/refresh pair and
stores the refresh token on the user, replacing any earlier one, so a user has
at most one live refresh token. HTTP concerns (cookies, envelope) stay in the
blueprint.
"""
from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from models import user_store
from models.user import User
from models.schemas.user import UserRegisterSchema, UserLoginSchema
from utils.security import InvalidTokenError, verify_refresh_token
from utils.validation import validate

from .errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    RequestValidationError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

user_register_schema = UserRegisterSchema()
user_login_schema = UserLoginSchema()


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class Session:
    user: User
    tokens: TokenPair


def _issue_tokens(user: User) -> TokenPair:
    try:
        return TokenPair(
            access_token=user.generate_access_token(),
            refresh_token=user.generate_refresh_token(),
        )
    except Exception as exc:
        logger.exception("Token signing failed for user %s", user.id)
        raise InternalError("Error generating tokens") from exc


def _start_session(user: User) -> Session:
    tokens = _issue_tokens(user)
    user_store.update_refresh_token(user.id, tokens.refresh_token)
    return Session(user=user, tokens=tokens)


def _validated(schema, payload) -> dict:
    result = validate(schema, payload)
    if not result.ok:
        raise RequestValidationError(result.message, errors=result.errors)
    return result.data


def register_user(payload) -> Session:
    data = _validated(user_register_schema, payload)

    if user_store.find_by_email(data["email"]):
        raise ConflictError("A user with the provided email already exists")
    try:
        user = user_store.create_user(data["name"], data["email"], data["password"])
    except user_store.DuplicateEmailError:
        raise ConflictError("A user with the provided email already exists")

    session = _start_session(user)
    logger.info("Registered user %s", user.id)
    return session


def login_user(payload) -> Session:
    data = _validated(user_login_schema, payload)

    user = user_store.find_by_email(data["email"])
    if not user:
        raise NotFoundError("User not found")
    if not user.verify_password(data["password"]):
        logger.warning("Failed login for user %s", user.id)
        raise UnauthorizedError("Invalid Credentials")

    session = _start_session(user)
    logger.info("User %s logged in", user.id)
    return session


def logout_user(user_id: str) -> None:
    user_store.update_refresh_token(user_id, None)
    logger.info("User %s logged out", user_id)


def refresh_session(presented: Optional[str]) -> TokenPair:
    if not presented:
        raise UnauthorizedError("Unauthorized request")

    try:
        user_id = verify_refresh_token(presented)
    except InvalidTokenError as exc:
        logger.warning("Rejected refresh token: %s", exc)
        raise UnauthorizedError("Invalid or expired refresh token.")

    user = user_store.find_by_id(user_id)
    stored = user.refresh_token if user else None
    if not stored or not hmac.compare_digest(stored.encode(), presented.encode()):
        logger.warning("Stale or unknown refresh token presented for user %s", user_id)
        raise UnauthorizedError("Invalid or expired refresh token.")

    tokens = _issue_tokens(user)
    if not user_store.swap_refresh_token(user.id, presented, tokens.refresh_token):
        # another request rotated this token first
        logger.warning("Concurrent refresh lost for user %s", user.id)
        raise UnauthorizedError("Invalid or expired refresh token.")

    logger.info("Rotated refresh token for user %s", user.id)
    return tokens
