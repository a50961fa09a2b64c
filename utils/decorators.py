from __future__ import annotations
from dataclasses import dataclass
from functools import wraps
from flask import request
from utils.security import InvalidTokenError, TokenExpiredError, verify_access_token
from api.errors import UnauthorizedError
from models import user_store
from models.user import User

ACCESS_COOKIE = "accessToken"


@dataclass(frozen=True)
class AuthContext:
    """Identity resolved from a valid access token, handed to protected views."""
    user: User

    @property
    def user_id(self) -> str:
        return self.user.id


def _access_token_from_request() -> str | None:
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth.split(" ", 1)[1].strip() or None
    return None


def jwt_required():
    """
    Protect a view with an access token taken from the accessToken cookie or a
    Bearer header. The view receives the resolved identity as `auth=AuthContext(...)`.
    Expired tokens are rejected; the client has to call /users/refresh itself.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = _access_token_from_request()
            if not token:
                raise UnauthorizedError("Unauthorized request")
            try:
                user_id = verify_access_token(token)
            except TokenExpiredError:
                raise UnauthorizedError("Access token expired")
            except InvalidTokenError:
                raise UnauthorizedError("Invalid access token")

            user = user_store.find_by_id(user_id)
            if not user:
                raise UnauthorizedError("Invalid access token")
            return fn(*args, auth=AuthContext(user=user), **kwargs)

        return wrapper

    return decorator
