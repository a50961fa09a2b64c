"""
Users blueprint (mounted at /api/v1/users):
- POST /register
- POST /login
- POST /refresh
- GET  /
- POST /logout

Tokens are returned in the JSON body and also set as HttpOnly cookies
(accessToken / refreshToken); logout clears both.
"""
from __future__ import annotations

from flask import Blueprint, request, current_app

from models.schemas.user import UserOutSchema
from utils.decorators import jwt_required, AuthContext, ACCESS_COOKIE

from . import sessions
from .responses import api_response

REFRESH_COOKIE = "refreshToken"

bp = Blueprint("users", __name__)

user_out_schema = UserOutSchema()


def _payload() -> dict:
    """Request body as a dict: JSON first, then url-encoded form fields."""
    data = request.get_json(silent=True)
    if data is None and request.form:
        data = request.form.to_dict()
    return data if data is not None else {}


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": current_app.config.get("COOKIE_SECURE", True),
    }


def _set_token_cookies(response, tokens: sessions.TokenPair):
    options = _cookie_options()
    response.set_cookie(
        ACCESS_COOKIE,
        tokens.access_token,
        max_age=int(current_app.config["ACCESS_TOKEN_EXPIRES"].total_seconds()),
        **options,
    )
    response.set_cookie(
        REFRESH_COOKIE,
        tokens.refresh_token,
        max_age=int(current_app.config["REFRESH_TOKEN_EXPIRES"].total_seconds()),
        **options,
    )
    return response


def _session_response(session: sessions.Session, message: str):
    response = api_response(
        {
            "user": user_out_schema.dump(session.user),
            "accessToken": session.tokens.access_token,
            "refreshToken": session.tokens.refresh_token,
        },
        message,
    )
    return _set_token_cookies(response, session.tokens)


@bp.post("/register")
def register():
    """
    Register a new user and log them in.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [name, email, password]
          properties:
            name: { type: string }
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: User created; tokens returned and set as cookies
      400:
        description: Validation error
      409:
        description: Email already registered
    """
    session = sessions.register_user(_payload())
    return _session_response(session, "User registered and logged in successfully")


@bp.post("/login")
def login():
    """
    Login: returns the user with a new access/refresh token pair
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password]
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: Validation error
      401:
        description: Invalid credentials
      404:
        description: User not found
    """
    session = sessions.login_user(_payload())
    return _session_response(session, "User logged in successfully")


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new access/refresh pair (rotation).
    The refreshToken cookie takes precedence over the body field.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            refreshToken: { type: string }
    responses:
      200:
        description: New tokens returned and set as cookies
      401:
        description: Missing, invalid, expired or already-used refresh token
    """
    presented = request.cookies.get(REFRESH_COOKIE)
    if not presented:
        payload = _payload()
        presented = payload.get("refreshToken") if isinstance(payload, dict) else None
    tokens = sessions.refresh_session(presented)
    response = api_response(
        {"accessToken": tokens.access_token, "refreshToken": tokens.refresh_token},
        "Access token refreshed successfully.",
    )
    return _set_token_cookies(response, tokens)


@bp.get("/", strict_slashes=False)
@jwt_required()
def current_user(auth: AuthContext):
    """
    Get the current user
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return api_response(user_out_schema.dump(auth.user), "Current user retrieved successfully")


@bp.post("/logout")
@jwt_required()
def logout(auth: AuthContext):
    """
    Logout: forgets the stored refresh token and clears both cookies
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    sessions.logout_user(auth.user_id)
    response = api_response({}, "User logged out successfully")
    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response
