"""Unit tests for the SQL-backed user directory."""

from __future__ import annotations

import pytest

from sessionauth.infra.sql.sql_user_directory import SQLUserDirectory
from sessionauth.models.user import User
from sessionauth.services._shared.errors import ConflictError, NotFoundError
from sessionauth.services._shared.ports import NewUser
from tests.factories.user import UserFactory


@pytest.fixture()
def directory() -> SQLUserDirectory:
    return SQLUserDirectory()


def test_get_by_id_returns_detached_snapshot(directory, session):
    user = UserFactory(email="alice@example.com", username="alice", is_admin=True)

    record = directory.get_by_id(user.id)

    assert record.id == user.id
    assert record.email == "alice@example.com"
    assert record.password_hash == user.password_hash
    assert record.is_admin is True
    assert record.enabled is True
    assert record.created_at.tzinfo is not None
    assert directory.get_by_id(user.id + 1000) is None


def test_get_by_identifier_accepts_email_or_username(directory, session):
    user = UserFactory(email="bob@example.com", username="bob")

    assert directory.get_by_identifier("BOB@example.com").id == user.id
    assert directory.get_by_identifier("bob").id == user.id
    assert directory.get_by_identifier("nobody") is None


def test_email_taken(directory, session):
    UserFactory(email="carol@example.com")

    assert directory.email_taken(" Carol@Example.com ")
    assert not directory.email_taken("dave@example.com")


def test_create_inserts_enabled_non_admin(directory, session):
    record = directory.create(
        NewUser(email="New@Example.com", password_hash="h", username="newbie", first_name="N")
    )

    assert record.id is not None
    assert record.email == "new@example.com"
    assert record.is_admin is False
    assert record.enabled is True
    assert session.get(User, record.id).first_name == "N"


@pytest.mark.parametrize(
    "new_user",
    [
        NewUser(email="taken@example.com", password_hash="h"),
        NewUser(email="other@example.com", password_hash="h", username="taken"),
    ],
)
def test_create_conflicts_on_email_or_username(directory, session, new_user):
    UserFactory(email="taken@example.com", username="taken")

    with pytest.raises(ConflictError):
        directory.create(new_user)


def test_set_password_hash_and_enabled(directory, session):
    user = UserFactory()

    directory.set_password_hash(user.id, "new-hash")
    directory.set_enabled(user.id, False)

    record = directory.get_by_id(user.id)
    assert record.password_hash == "new-hash"
    assert record.enabled is False


def test_updates_on_missing_user_raise_not_found(directory, session):
    with pytest.raises(NotFoundError):
        directory.set_enabled(424242, False)
    with pytest.raises(NotFoundError):
        directory.set_password_hash(424242, "h")
