"""Tests for the RefreshToken model."""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from sessionauth.models.base import as_utc, utcnow
from sessionauth.models.refresh_token import RefreshToken
from tests.factories.user import UserFactory


class TestRefreshToken:
    def test_defaults_and_utc_round_trip(self, session):
        user = UserFactory()
        expires = utcnow() + timedelta(days=1)
        row = RefreshToken(user_id=user.id, token_digest="a" * 64, expires_at=expires)
        session.add(row)
        session.commit()
        session.expire(row)

        assert row.revoked is False
        assert as_utc(row.expires_at) == expires

    def test_digest_is_unique(self, session):
        user = UserFactory()
        expires = utcnow() + timedelta(days=1)
        session.add(RefreshToken(user_id=user.id, token_digest="b" * 64, expires_at=expires))
        session.commit()

        session.add(RefreshToken(user_id=user.id, token_digest="b" * 64, expires_at=expires))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_digest_length_checked(self, session):
        user = UserFactory()
        session.add(
            RefreshToken(user_id=user.id, token_digest="short", expires_at=utcnow())
        )
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()
