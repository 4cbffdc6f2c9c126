"""Port for the user directory the session lifecycle reads and writes."""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol

from sessionauth.services._shared.errors import ConflictError, NotFoundError


@dataclass(frozen=True, slots=True)
class UserRecord:
    """Snapshot of a user as the session service needs it."""

    id: int
    email: str
    password_hash: str
    is_admin: bool = False
    enabled: bool = True
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_picture_url: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class NewUser:
    """
    Data needed to create an account.

    :param email: Login email (normalized by the directory).
    :param password_hash: Digest produced by the credential hasher.
    """

    email: str
    password_hash: str
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_picture_url: str | None = None


class UserDirectory(Protocol):
    """Lookup and minimal mutation of user accounts."""

    def get_by_id(self, owner_id: int) -> UserRecord | None: ...

    def get_by_identifier(self, identifier: str) -> UserRecord | None:
        """Match on email (normalized) or username."""
        ...

    def email_taken(self, email: str) -> bool: ...

    def create(self, new_user: NewUser) -> UserRecord:
        """Create an enabled, non-admin account.

        :raises ConflictError: If the email (or username) is already used.
        """
        ...

    def set_password_hash(self, owner_id: int, password_hash: str) -> None:
        """:raises NotFoundError: If the user does not exist."""
        ...

    def set_enabled(self, owner_id: int, enabled: bool) -> None:
        """:raises NotFoundError: If the user does not exist."""
        ...


class InMemoryUserDirectory(UserDirectory):
    """Process-local directory used in unit tests."""

    def __init__(self) -> None:
        self._users: dict[int, UserRecord] = {}
        self._seq = 0
        self._lock = threading.Lock()

    @staticmethod
    def _norm(email: str) -> str:
        return email.strip().lower()

    def add(self, record: UserRecord) -> UserRecord:
        """Seed a user as-is (admin flag and enabled state included)."""
        with self._lock:
            self._users[record.id] = replace(record, email=self._norm(record.email))
            self._seq = max(self._seq, record.id)
            return self._users[record.id]

    def get_by_id(self, owner_id: int) -> UserRecord | None:
        return self._users.get(owner_id)

    def get_by_identifier(self, identifier: str) -> UserRecord | None:
        raw = identifier.strip()
        by_email = next((u for u in self._users.values() if u.email == self._norm(raw)), None)
        if by_email is not None:
            return by_email
        return next((u for u in self._users.values() if raw and u.username == raw), None)

    def email_taken(self, email: str) -> bool:
        return any(u.email == self._norm(email) for u in self._users.values())

    def create(self, new_user: NewUser) -> UserRecord:
        with self._lock:
            email = self._norm(new_user.email)
            if any(u.email == email for u in self._users.values()):
                raise ConflictError("User", "email already in use")
            if new_user.username and any(
                u.username == new_user.username for u in self._users.values()
            ):
                raise ConflictError("User", "username already in use")
            self._seq += 1
            record = UserRecord(
                id=self._seq,
                email=email,
                password_hash=new_user.password_hash,
                username=new_user.username,
                first_name=new_user.first_name,
                last_name=new_user.last_name,
                profile_picture_url=new_user.profile_picture_url,
                created_at=datetime.now(UTC),
            )
            self._users[record.id] = record
            return record

    def set_password_hash(self, owner_id: int, password_hash: str) -> None:
        with self._lock:
            user = self._users.get(owner_id)
            if user is None:
                raise NotFoundError("User", owner_id)
            self._users[owner_id] = replace(user, password_hash=password_hash)

    def set_enabled(self, owner_id: int, enabled: bool) -> None:
        with self._lock:
            user = self._users.get(owner_id)
            if user is None:
                raise NotFoundError("User", owner_id)
            self._users[owner_id] = replace(user, enabled=enabled)
