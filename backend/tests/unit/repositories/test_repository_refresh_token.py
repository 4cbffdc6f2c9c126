"""Unit tests for RefreshTokenRepository."""

from __future__ import annotations

from datetime import timedelta

import pytest

from sessionauth.models.base import utcnow
from sessionauth.models.refresh_token import RefreshToken
from sessionauth.repositories.refresh_token import RefreshTokenRepository
from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.user import UserFactory


class TestRefreshTokenRepository:
    @pytest.fixture()
    def repo(self):
        return RefreshTokenRepository()

    def test_create_and_get_by_digest(self, repo, session):
        user = UserFactory()
        row = repo.create(user_id=user.id, token_digest="c" * 64, expires_at=utcnow())
        session.commit()

        assert row.id is not None
        assert repo.get_by_digest("c" * 64).id == row.id
        assert repo.get_by_digest("d" * 64) is None

    def test_list_active_for_user_skips_revoked_and_expired(self, repo, session):
        user = UserFactory()
        now = utcnow()
        live = RefreshTokenFactory(user=user)
        RefreshTokenFactory(user=user, revoked=True)
        RefreshTokenFactory(user=user, expires_at=now - timedelta(seconds=1))
        RefreshTokenFactory()  # someone else's

        assert [r.id for r in repo.list_active_for_user(user.id, now=now)] == [live.id]

    def test_revoke_by_digest_is_one_way(self, repo, session):
        row = RefreshTokenFactory()

        assert repo.revoke_by_digest(row.token_digest) == 1
        assert repo.revoke_by_digest(row.token_digest) == 0
        assert repo.revoke_by_digest("e" * 64) == 0
        session.commit()

        session.expire_all()
        assert repo.get_by_digest(row.token_digest).revoked is True

    def test_revoke_all_for_user(self, repo, session):
        user = UserFactory()
        RefreshTokenFactory.create_batch(2, user=user)
        RefreshTokenFactory(user=user, revoked=True)
        other = RefreshTokenFactory()

        assert repo.revoke_all_for_user(user.id) == 2
        assert repo.revoke_all_for_user(user.id) == 0
        session.commit()

        session.expire_all()
        assert repo.get_by_digest(other.token_digest).revoked is False

    def test_delete_expired_removes_revoked_and_live_rows_past_expiry(self, repo, session):
        now = utcnow()
        RefreshTokenFactory(expires_at=now - timedelta(hours=1))
        RefreshTokenFactory(expires_at=now - timedelta(hours=1), revoked=True)
        RefreshTokenFactory(expires_at=now)
        keep = RefreshTokenFactory(expires_at=now + timedelta(hours=1))

        assert repo.delete_expired(now=now) == 3
        session.commit()

        assert [r.id for r in session.query(RefreshToken).all()] == [keep.id]
