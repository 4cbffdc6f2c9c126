"""Token codec adapter backed by Flask-JWT-Extended (PyJWT underneath)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

import jwt as pyjwt
from flask_jwt_extended import create_access_token, create_refresh_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from sessionauth.services._shared.ports.token_codec import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    ClaimSet,
    InvalidTokenError,
    TokenClaims,
    TokenCodec,
)


def _claims_payload(claims: ClaimSet) -> dict[str, Any]:
    return {"email": claims.email, "is_admin": bool(claims.is_admin)}


def _timestamp(payload: Mapping[str, Any], key: str) -> datetime:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"Claim {key!r} is not a timestamp.")
    return datetime.fromtimestamp(value, tz=UTC)


@dataclass(slots=True)
class JWTTokenCodec(TokenCodec):
    """
    Sign and verify HS256 JWTs via Flask-JWT-Extended.

    The library adds ``type``, ``jti``, ``iat`` and ``nbf``; the subject is
    the owner id rendered as a string.

    .. note::
       Requires an active Flask app context carrying ``JWT_SECRET_KEY``.

    :param access_ttl: Lifetime of access tokens.
    :param refresh_ttl: Lifetime of refresh tokens.
    """

    access_ttl: timedelta
    refresh_ttl: timedelta

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> JWTTokenCodec:
        return cls(
            access_ttl=cast(timedelta, config["JWT_ACCESS_TOKEN_EXPIRES"]),
            refresh_ttl=cast(timedelta, config["JWT_REFRESH_TOKEN_EXPIRES"]),
        )

    @property
    def access_lifetime(self) -> timedelta:
        return self.access_ttl

    def issue_access(self, claims: ClaimSet) -> str:
        return cast(
            str,
            create_access_token(
                identity=str(claims.owner_id),
                additional_claims=_claims_payload(claims),
                expires_delta=self.access_ttl,
            ),
        )

    def issue_refresh(self, claims: ClaimSet) -> str:
        return cast(
            str,
            create_refresh_token(
                identity=str(claims.owner_id),
                additional_claims=_claims_payload(claims),
                expires_delta=self.refresh_ttl,
            ),
        )

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry, then map the payload to :class:`TokenClaims`.

        :raises InvalidTokenError: On any signature, encoding, expiry or shape problem.
        """
        if not token or not isinstance(token, str):
            raise InvalidTokenError("empty token")
        try:
            payload = cast(dict[str, Any], decode_token(token))
        except (PyJWTError, JWTExtendedException) as exc:
            raise InvalidTokenError(f"token rejected: {type(exc).__name__}") from exc

        try:
            token_type = str(payload["type"])
            if token_type not in (ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE):
                raise ValueError(f"Unknown token type {token_type!r}.")
            return TokenClaims(
                owner_id=int(payload["sub"]),
                email=str(payload["email"]),
                is_admin=bool(payload.get("is_admin", False)),
                token_type=token_type,
                jti=str(payload["jti"]),
                issued_at=_timestamp(payload, "iat"),
                expires_at=_timestamp(payload, "exp"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidTokenError("token payload has an unexpected shape") from exc

    def expiry_of(self, token: str) -> datetime | None:
        """Read ``exp`` without checking the signature or expiry."""
        try:
            payload = pyjwt.decode(token, options={"verify_signature": False})
            return _timestamp(payload, "exp")
        except (PyJWTError, KeyError, ValueError):
            return None
