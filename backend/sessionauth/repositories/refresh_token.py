"""Refresh-token repository.

Every mutation here is a single SQL statement so a unit of work that wraps
one call applies fully or not at all.
"""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import delete, select, update

from sessionauth.models.refresh_token import RefreshToken
from sessionauth.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken` rows."""

    model = RefreshToken

    def create(self, *, user_id: int, token_digest: str, expires_at: datetime) -> RefreshToken:
        """Insert a non-revoked row and flush to obtain its id."""
        return self.add(
            RefreshToken(user_id=user_id, token_digest=token_digest, expires_at=expires_at)
        )

    def get_by_digest(self, token_digest: str) -> RefreshToken | None:
        stmt = select(RefreshToken).where(RefreshToken.token_digest == token_digest)
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def list_active_for_user(self, user_id: int, *, now: datetime) -> list[RefreshToken]:
        """Return non-revoked, unexpired rows for ``user_id``, newest first."""
        stmt = (
            select(RefreshToken)
            .where(
                RefreshToken.user_id == user_id,
                RefreshToken.revoked.is_(False),
                RefreshToken.expires_at > now,
            )
            .order_by(RefreshToken.created_at.desc(), RefreshToken.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def revoke_by_digest(self, token_digest: str) -> int:
        """Flip ``revoked`` on the matching row; already-revoked rows are untouched.

        :returns: Number of rows that changed (0 or 1).
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token_digest == token_digest, RefreshToken.revoked.is_(False))
            .values(revoked=True)
            .execution_options(synchronize_session="fetch")
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def revoke_all_for_user(self, user_id: int) -> int:
        """Flip every non-revoked row owned by ``user_id`` in one statement."""
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.revoked.is_(False))
            .values(revoked=True)
            .execution_options(synchronize_session="fetch")
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def delete_expired(self, *, now: datetime) -> int:
        """Delete rows whose ``expires_at`` is not after ``now``, revoked or not."""
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.expires_at <= now)
            .execution_options(synchronize_session="fetch")
        )
        return int(self.session.execute(stmt).rowcount or 0)
