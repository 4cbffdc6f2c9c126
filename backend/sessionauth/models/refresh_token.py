"""Persisted refresh-token sessions, keyed by digest."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, String, false
from sqlalchemy.orm import Mapped, mapped_column

from sessionauth.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin


class RefreshToken(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    One row per issued refresh token; the plaintext token is never stored.

    Fields
    ------
    user_id : int
        Owner of the session. Rows disappear with the user.
    token_digest : str
        SHA-256 hex digest of the refresh token. Unique across all rows.
    expires_at : datetime
        Copied from the token's own ``exp`` claim at issuance.
    revoked : bool
        Monotonic: once ``True`` it is never written back to ``False``.
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    token_digest: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    __table_args__ = (
        CheckConstraint("length(token_digest) = 64", name="digest_len"),
        Index("ix_refresh_tokens_user_id_revoked", "user_id", "revoked"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )
