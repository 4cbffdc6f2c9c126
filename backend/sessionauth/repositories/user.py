"""User repository: lookups the session lifecycle needs."""

from __future__ import annotations

from typing import cast

from sqlalchemy import or_, select

from sessionauth.models.user import User
from sessionauth.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It never hashes passwords or issues tokens; it stores whatever digest
    the service hands over.
    """

    model = User

    def _updatable_fields(self):
        """Fields services may assign; ``email`` and ``is_admin`` stay fixed."""
        return {
            "password_hash",
            "enabled",
            "username",
            "first_name",
            "last_name",
            "profile_picture_url",
        }

    def get_by_identifier(self, identifier: str) -> User | None:
        """Fetch a user whose email or username matches ``identifier``.

        Emails are compared normalized; usernames are compared trimmed and
        case-sensitive. Email matches win when both could apply.

        :param identifier: Email address or username supplied at login.
        :type identifier: str
        :returns: User instance or ``None`` when nothing matches.
        :rtype: User | None
        """
        raw = identifier.strip()
        if not raw:
            return None
        stmt = (
            select(User)
            .where(or_(User.email == normalize_email(raw), User.username == raw))
            .order_by((User.email == normalize_email(raw)).desc(), User.id.asc())
        )
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == normalize_email(email))
        return self.session.execute(stmt).first() is not None

    def exists_by_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username.strip())
        return self.session.execute(stmt).first() is not None
