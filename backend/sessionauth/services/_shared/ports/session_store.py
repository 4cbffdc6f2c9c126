"""Port for persisted refresh-token sessions."""

from __future__ import annotations

import hashlib
import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol


def digest_token(token: str) -> str:
    """Return the SHA-256 hex digest under which a refresh token is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Read-model for one issued refresh token.

    :ivar token_id: Surrogate identifier, safe to show to the owner.
    :ivar owner_id: User the session belongs to.
    :ivar token_digest: One-way digest of the token; never leaves the service.
    :ivar expires_at: Absolute expiry copied from the token itself (UTC).
    :ivar revoked: Monotonic revocation flag.
    :ivar created_at: Issuance instant (UTC).
    """

    token_id: int
    owner_id: int
    token_digest: str
    expires_at: datetime
    revoked: bool
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def is_active(self, now: datetime) -> bool:
        return not self.revoked and not self.is_expired(now)


class SessionStore(Protocol):
    """
    Durable record of every issued refresh token.

    Every mutation MUST be one atomic operation against the backing store.
    ``revoke`` and ``revoke_all_for_owner`` MUST be idempotent.
    """

    def create(self, owner_id: int, token_digest: str, expires_at: datetime) -> RefreshTokenRecord:
        """Persist a non-revoked record. Digests are unique."""
        ...

    def find_by_digest(self, token_digest: str) -> RefreshTokenRecord | None: ...

    def find_by_id(self, token_id: int) -> RefreshTokenRecord | None: ...

    def revoke(self, token_digest: str) -> None:
        """Revoke one record; unknown or already-revoked digests are a no-op."""
        ...

    def revoke_all_for_owner(self, owner_id: int) -> None: ...

    def list_active_for_owner(self, owner_id: int) -> list[RefreshTokenRecord]:
        """Neither revoked nor expired, newest first."""
        ...

    def sweep_expired(self) -> int:
        """Delete expired records regardless of ``revoked``; return how many."""
        ...


class InMemorySessionStore(SessionStore):
    """
    Process-local session store.

    .. note::
       A lock stands in for the atomicity a real store provides; useful for
       unit tests and single-process tooling only.
    """

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._by_digest: dict[str, RefreshTokenRecord] = {}
        self._seq = 0
        self._lock = threading.Lock()
        self._clock = clock or (lambda: datetime.now(UTC))

    def create(self, owner_id: int, token_digest: str, expires_at: datetime) -> RefreshTokenRecord:
        with self._lock:
            if token_digest in self._by_digest:
                raise ValueError("Duplicate refresh token digest.")
            self._seq += 1
            record = RefreshTokenRecord(
                token_id=self._seq,
                owner_id=owner_id,
                token_digest=token_digest,
                expires_at=expires_at,
                revoked=False,
                created_at=self._clock(),
            )
            self._by_digest[token_digest] = record
            return record

    def find_by_digest(self, token_digest: str) -> RefreshTokenRecord | None:
        with self._lock:
            return self._by_digest.get(token_digest)

    def find_by_id(self, token_id: int) -> RefreshTokenRecord | None:
        with self._lock:
            return next((r for r in self._by_digest.values() if r.token_id == token_id), None)

    def revoke(self, token_digest: str) -> None:
        with self._lock:
            record = self._by_digest.get(token_digest)
            if record is not None and not record.revoked:
                self._by_digest[token_digest] = replace(record, revoked=True)

    def revoke_all_for_owner(self, owner_id: int) -> None:
        with self._lock:
            for digest, record in list(self._by_digest.items()):
                if record.owner_id == owner_id and not record.revoked:
                    self._by_digest[digest] = replace(record, revoked=True)

    def list_active_for_owner(self, owner_id: int) -> list[RefreshTokenRecord]:
        now = self._clock()
        with self._lock:
            active = [
                r for r in self._by_digest.values() if r.owner_id == owner_id and r.is_active(now)
            ]
        return sorted(active, key=lambda r: (r.created_at, r.token_id), reverse=True)

    def sweep_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [d for d, r in self._by_digest.items() if r.is_expired(now)]
            for digest in expired:
                del self._by_digest[digest]
            return len(expired)
