"""Session store adapter persisting refresh-token records in SQL."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError

from sessionauth.models.base import as_utc
from sessionauth.models.refresh_token import RefreshToken
from sessionauth.services._shared.ports.session_store import RefreshTokenRecord, SessionStore
from sessionauth.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


def to_record(row: RefreshToken) -> RefreshTokenRecord:
    """Map an ORM row to the port's read-model, normalizing instants to UTC."""
    return RefreshTokenRecord(
        token_id=row.id,
        owner_id=row.user_id,
        token_digest=row.token_digest,
        expires_at=as_utc(row.expires_at),
        revoked=bool(row.revoked),
        created_at=as_utc(row.created_at),
    )


class SQLSessionStore(SessionStore):
    """
    :class:`SessionStore` over the ``refresh_tokens`` table.

    Each mutation opens its own read-write unit of work around a single
    statement; reads use a read-only unit of work.

    :param clock: Source of "now" for expiry decisions (UTC).
    """

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))

    def create(self, owner_id: int, token_digest: str, expires_at: datetime) -> RefreshTokenRecord:
        """:raises ValueError: If the digest is already stored."""
        try:
            with SQLAlchemyUnitOfWork() as uow:
                row = uow.refresh_tokens.create(
                    user_id=owner_id,
                    token_digest=token_digest,
                    expires_at=as_utc(expires_at),
                )
                record = to_record(row)
        except IntegrityError as exc:
            raise ValueError("Duplicate refresh token digest.") from exc
        return record

    def find_by_digest(self, token_digest: str) -> RefreshTokenRecord | None:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            row = uow.refresh_tokens.get_by_digest(token_digest)
            return to_record(row) if row is not None else None

    def find_by_id(self, token_id: int) -> RefreshTokenRecord | None:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            row = uow.refresh_tokens.get(token_id)
            return to_record(row) if row is not None else None

    def revoke(self, token_digest: str) -> None:
        with SQLAlchemyUnitOfWork() as uow:
            uow.refresh_tokens.revoke_by_digest(token_digest)

    def revoke_all_for_owner(self, owner_id: int) -> None:
        with SQLAlchemyUnitOfWork() as uow:
            changed = uow.refresh_tokens.revoke_all_for_user(owner_id)
        log.debug("session_store.revoke_all", extra={"owner_id": owner_id, "count": changed})

    def list_active_for_owner(self, owner_id: int) -> list[RefreshTokenRecord]:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            rows = uow.refresh_tokens.list_active_for_user(owner_id, now=self._clock())
            return [to_record(row) for row in rows]

    def sweep_expired(self) -> int:
        with SQLAlchemyUnitOfWork() as uow:
            deleted = uow.refresh_tokens.delete_expired(now=self._clock())
        return deleted
