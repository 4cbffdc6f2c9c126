# comments in English; reST docstrings
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import redis  # type: ignore[import-untyped]

from sessionauth.services._shared.ports.session_store import RefreshTokenRecord, SessionStore

log = logging.getLogger(__name__)


def _s(value: Any) -> str:
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


class RedisSessionStore(SessionStore):
    """
    Redis-backed session store.

    Layout
    ------
    ``rt:{digest}``
        Hash with ``token_id``, ``owner_id``, ``expires_at``, ``created_at`` and
        ``revoked``. Expires (``EXPIREAT``) when the token does.
    ``rt:id:{token_id}``
        Digest lookup by surrogate id, same expiry as the hash.
    ``rt:u:{owner_id}``
        Set of digests issued to an owner. Members outlive their hashes until
        :meth:`sweep_expired` reclaims them.
    ``rt:seq``
        Counter allocating token ids.

    Mutations run in ``MULTI/EXEC`` pipelines; those that must not resurrect an
    expired hash ``WATCH`` it first and retry on conflict.

    :param r: A Redis client (already connected).
    :param clock: Source of "now" (UTC).
    """

    def __init__(self, r: redis.Redis, *, clock: Callable[[], datetime] | None = None) -> None:
        self.r = r
        self._clock = clock or (lambda: datetime.now(UTC))

    # -------------------- helpers --------------------

    @staticmethod
    def _k(token_digest: str) -> str:
        return f"rt:{token_digest}"

    @staticmethod
    def _kid(token_id: int) -> str:
        return f"rt:id:{token_id}"

    @staticmethod
    def _ku(owner_id: int | str) -> str:
        return f"rt:u:{owner_id}"

    SEQ_KEY = "rt:seq"
    OWNER_PATTERN = "rt:u:*"

    @staticmethod
    def _to_record(token_digest: str, h: Mapping[Any, Any]) -> RefreshTokenRecord | None:
        if not h:
            return None
        fields = {_s(k): _s(v) for k, v in h.items()}
        return RefreshTokenRecord(
            token_id=int(fields["token_id"]),
            owner_id=int(fields["owner_id"]),
            token_digest=token_digest,
            expires_at=datetime.fromtimestamp(float(fields["expires_at"]), tz=UTC),
            revoked=fields.get("revoked", "0") == "1",
            created_at=datetime.fromtimestamp(float(fields["created_at"]), tz=UTC),
        )

    # -------------------- API ------------------------

    def create(self, owner_id: int, token_digest: str, expires_at: datetime) -> RefreshTokenRecord:
        """
        Insert the record, its id lookup and the owner index in one transaction.

        :raises ValueError: If the digest is already stored.
        """
        token_id = int(self.r.incr(self.SEQ_KEY))
        created_at = self._clock()
        exp_ts = int(expires_at.timestamp())
        key = self._k(token_digest)

        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    if p.exists(key):
                        p.unwatch()
                        raise ValueError("Duplicate refresh token digest.")
                    p.multi()
                    p.hset(
                        key,
                        mapping={
                            "token_id": str(token_id),
                            "owner_id": str(owner_id),
                            "expires_at": str(exp_ts),
                            "created_at": f"{created_at.timestamp():.6f}",
                            "revoked": "0",
                        },
                    )
                    p.expireat(key, exp_ts)
                    p.set(self._kid(token_id), token_digest)
                    p.expireat(self._kid(token_id), exp_ts)
                    p.sadd(self._ku(owner_id), token_digest)
                    p.execute()
                break
            except redis.WatchError:
                continue

        return RefreshTokenRecord(
            token_id=token_id,
            owner_id=owner_id,
            token_digest=token_digest,
            expires_at=datetime.fromtimestamp(exp_ts, tz=UTC),
            revoked=False,
            created_at=created_at,
        )

    def find_by_digest(self, token_digest: str) -> RefreshTokenRecord | None:
        return self._to_record(token_digest, self.r.hgetall(self._k(token_digest)))

    def find_by_id(self, token_id: int) -> RefreshTokenRecord | None:
        digest = self.r.get(self._kid(token_id))
        if digest is None:
            return None
        return self.find_by_digest(_s(digest))

    def revoke(self, token_digest: str) -> None:
        """Set ``revoked=1`` if the hash still exists; never recreate it."""
        self._revoke_existing([token_digest])

    def revoke_all_for_owner(self, owner_id: int) -> None:
        digests = [_s(m) for m in self.r.smembers(self._ku(owner_id))]
        changed = self._revoke_existing(digests)
        log.debug("session_store.revoke_all", extra={"owner_id": owner_id, "count": changed})

    def _revoke_existing(self, digests: list[str]) -> int:
        if not digests:
            return 0
        keys = [self._k(d) for d in digests]
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(*keys)
                    present = [k for k in keys if p.exists(k)]
                    if not present:
                        p.unwatch()
                        return 0
                    p.multi()
                    for k in present:
                        p.hset(k, "revoked", "1")
                    p.execute()
                return len(present)
            except redis.WatchError:
                continue

    def list_active_for_owner(self, owner_id: int) -> list[RefreshTokenRecord]:
        digests = sorted(_s(m) for m in self.r.smembers(self._ku(owner_id)))
        if not digests:
            return []
        pipe = self.r.pipeline(transaction=False)
        for d in digests:
            pipe.hgetall(self._k(d))
        now = self._clock()
        records = [
            rec
            for d, h in zip(digests, pipe.execute(), strict=True)
            if (rec := self._to_record(d, h)) is not None and rec.is_active(now)
        ]
        return sorted(records, key=lambda r: (r.created_at, r.token_id), reverse=True)

    def sweep_expired(self) -> int:
        """
        Reclaim expired records.

        Hashes normally vanish through their own expiry; this drops the owner
        index entries left behind and deletes any hash whose ``expires_at``
        has passed but which Redis has not evicted yet.

        :returns: Number of expired records reclaimed.
        """
        now_ts = self._clock().timestamp()
        reclaimed = 0
        for owner_key in self.r.scan_iter(match=self.OWNER_PATTERN):
            digests = [_s(m) for m in self.r.smembers(owner_key)]
            if not digests:
                continue
            read = self.r.pipeline(transaction=False)
            for d in digests:
                read.hmget(self._k(d), ["expires_at", "token_id"])
            expired: list[tuple[str, str | None]] = []
            for d, (exp, token_id) in zip(digests, read.execute(), strict=True):
                if exp is None or float(_s(exp)) <= now_ts:
                    expired.append((d, _s(token_id) if token_id is not None else None))
            if not expired:
                continue
            p = self.r.pipeline(transaction=True)
            for d, token_id in expired:
                p.delete(self._k(d))
                if token_id is not None:
                    p.delete(self._kid(int(token_id)))
            p.srem(owner_key, *[d for d, _ in expired])
            p.execute()
            reclaimed += len(expired)
        return reclaimed
