"""
Credential store: lookups and refresh-token writes for User records.

swap_refresh_token() is a single conditional UPDATE, so two requests rotating
the same refresh token cannot both win.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError

from models import storage
from models.user import User


class DuplicateEmailError(Exception):
    """Raised when inserting a user whose email is already taken."""


def find_by_email(email: str) -> Optional[User]:
    session = storage.get_session()
    return session.query(User).filter(User.email == email).first()


def find_by_id(user_id: str) -> Optional[User]:
    return storage.get(User, user_id)


def create_user(name: str, email: str, password: str) -> User:
    """Insert a user; the plaintext password is hashed by User.password."""
    user = User(name=name, email=email, password=password)
    try:
        user.save()
    except IntegrityError as exc:
        # storage.save() already rolled back
        raise DuplicateEmailError(email) from exc
    return user


def update_refresh_token(user_id: str, token: Optional[str]) -> bool:
    """Unconditionally set (or clear, with None) the stored refresh token."""
    session = storage.get_session()
    updated = (
        session.query(User)
        .filter(User.id == user_id)
        .update({User.refresh_token: token}, synchronize_session="evaluate")
    )
    storage.save()
    return updated == 1


def swap_refresh_token(user_id: str, expected: str, token: str) -> bool:
    """Replace the stored refresh token only if it still equals `expected`."""
    session = storage.get_session()
    updated = (
        session.query(User)
        .filter(User.id == user_id, User.refresh_token == expected)
        .update({User.refresh_token: token}, synchronize_session="evaluate")
    )
    storage.save()
    return updated == 1
