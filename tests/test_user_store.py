from __future__ import annotations

import pytest

from models import storage, user_store
from models.user import User


@pytest.fixture
def alice(app):
    with app.app_context():
        yield user_store.create_user("Alice", "a@x.com", "password1")


def test_create_user_hashes_password(alice):
    assert alice.password_hash != "password1"
    assert alice.verify_password("password1")
    assert not alice.verify_password("password2")
    assert alice.refresh_token is None
    with pytest.raises(AttributeError):
        alice.password


def test_lookups(alice):
    assert user_store.find_by_email("a@x.com").id == alice.id
    assert user_store.find_by_id(alice.id).email == "a@x.com"
    assert user_store.find_by_email("b@x.com") is None
    assert user_store.find_by_id("missing") is None
    assert user_store.find_by_id(None) is None


def test_duplicate_email_is_rejected(alice):
    with pytest.raises(user_store.DuplicateEmailError):
        user_store.create_user("Alicia", "a@x.com", "password2")
    # the session is still usable after the rollback
    assert user_store.find_by_email("a@x.com").name == "Alice"


def test_update_refresh_token_sets_and_clears(alice):
    assert user_store.update_refresh_token(alice.id, "token-1")
    storage.close()
    assert user_store.find_by_id(alice.id).refresh_token == "token-1"

    assert user_store.update_refresh_token(alice.id, None)
    storage.close()
    assert user_store.find_by_id(alice.id).refresh_token is None


def test_update_refresh_token_for_unknown_user(app):
    with app.app_context():
        assert user_store.update_refresh_token("missing", "token") is False


def test_swap_only_succeeds_against_current_token(alice):
    user_store.update_refresh_token(alice.id, "token-1")

    assert user_store.swap_refresh_token(alice.id, "token-1", "token-2") is True
    # a second request presenting the same token loses
    assert user_store.swap_refresh_token(alice.id, "token-1", "token-3") is False

    storage.close()
    assert user_store.find_by_id(alice.id).refresh_token == "token-2"


def test_swap_after_logout_fails(alice):
    user_store.update_refresh_token(alice.id, "token-1")
    user_store.update_refresh_token(alice.id, None)
    assert user_store.swap_refresh_token(alice.id, "token-1", "token-2") is False


def test_user_tokens_are_bound_to_record(alice):
    from utils.security import verify_access_token, verify_refresh_token

    assert verify_access_token(alice.generate_access_token()) == alice.id
    assert verify_refresh_token(alice.generate_refresh_token()) == alice.id
    assert isinstance(alice, User)
