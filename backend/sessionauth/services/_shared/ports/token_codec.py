"""Port for signing and verifying access/refresh tokens."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from sessionauth.services._shared.errors import AuthenticationError

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class InvalidTokenError(AuthenticationError):
    """Bad signature, malformed encoding, wrong shape or past expiry."""


@dataclass(frozen=True, slots=True)
class ClaimSet:
    """
    Claims embedded in both tokens of a pair.

    :ivar owner_id: User identifier (the JWT ``sub``).
    :ivar email: Normalized login email.
    :ivar is_admin: Administrator flag at issuance time.
    """

    owner_id: int
    email: str
    is_admin: bool


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Claims recovered from a verified token."""

    owner_id: int
    email: str
    is_admin: bool
    token_type: str
    jti: str
    issued_at: datetime
    expires_at: datetime


class TokenCodec(Protocol):
    """Stateless creation and verification of signed tokens."""

    @property
    def access_lifetime(self) -> timedelta: ...

    def issue_access(self, claims: ClaimSet) -> str: ...

    def issue_refresh(self, claims: ClaimSet) -> str: ...

    def verify(self, token: str) -> TokenClaims:
        """Return the claims, or raise :class:`InvalidTokenError`."""
        ...

    def expiry_of(self, token: str) -> datetime | None:
        """Read ``exp`` without verifying; ``None`` when absent or undecodable."""
        ...


class StubTokenCodec(TokenCodec):
    """Deterministic, unsigned codec used in unit tests.

    Tokens are opaque strings registered in memory; only tokens this instance
    issued verify. ``clock`` drives both issuance and expiry checks.
    """

    def __init__(
        self,
        *,
        access_lifetime: timedelta = timedelta(hours=24),
        refresh_lifetime: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._access_lifetime = access_lifetime
        self._refresh_lifetime = refresh_lifetime
        self._clock = clock or (lambda: datetime.now(UTC))
        self._seq = 0
        self._issued: dict[str, TokenClaims] = {}

    @property
    def access_lifetime(self) -> timedelta:
        return self._access_lifetime

    def _mk(self, claims: ClaimSet, token_type: str, lifetime: timedelta) -> str:
        self._seq += 1
        now = self._clock()
        jti = f"jti-{self._seq}"
        token = f"{token_type}.{claims.owner_id}.{jti}"
        self._issued[token] = TokenClaims(
            owner_id=claims.owner_id,
            email=claims.email,
            is_admin=claims.is_admin,
            token_type=token_type,
            jti=jti,
            issued_at=now,
            expires_at=now + lifetime,
        )
        return token

    def issue_access(self, claims: ClaimSet) -> str:
        return self._mk(claims, ACCESS_TOKEN_TYPE, self._access_lifetime)

    def issue_refresh(self, claims: ClaimSet) -> str:
        return self._mk(claims, REFRESH_TOKEN_TYPE, self._refresh_lifetime)

    def verify(self, token: str) -> TokenClaims:
        claims = self._issued.get(token)
        if claims is None:
            raise InvalidTokenError("token not issued by this codec")
        if claims.expires_at <= self._clock():
            raise InvalidTokenError("token expired")
        return claims

    def expiry_of(self, token: str) -> datetime | None:
        claims = self._issued.get(token)
        return claims.expires_at if claims else None
