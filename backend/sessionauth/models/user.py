"""User account model read and written by the session lifecycle."""

from __future__ import annotations

from sqlalchemy import Boolean, Index, String, UniqueConstraint, false, true
from sqlalchemy.orm import Mapped, mapped_column, validates

from sessionauth.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Account identity owned by the user directory.

    The session core only ever writes ``password_hash`` and ``enabled``;
    everything else is profile data projected into public responses.

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed). Unique.
    username : str | None
        Optional alternate login handle. Unique when present.
    password_hash : str
        Salted one-way digest produced by the credential hasher.
    is_admin : bool
        Grants access to maintenance endpoints. Never set by registration.
    enabled : bool
        ``False`` blocks login, refresh and every authenticated call.
    first_name, last_name, profile_picture_url : str | None
        Display fields.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(254), nullable=False)
    username: Mapped[str | None] = mapped_column(String(50), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    profile_picture_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("username", name="uq_users_username"),
        Index("ix_users_email", "email"),
    )

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :param key: Field name (``email``).
        :param value: Email to normalize.
        :returns: Normalized email (lowercased/trimmed).
        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("username")
    def _normalize_username(self, key: str, value: str | None) -> str | None:
        """Trim usernames; blank values collapse to ``None``."""
        if value is None:
            return None
        v = value.strip()
        return v or None
