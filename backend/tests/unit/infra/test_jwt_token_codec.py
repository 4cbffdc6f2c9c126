# tests/unit/infra/test_jwt_token_codec.py
"""Unit tests for the Flask-JWT-Extended token codec."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt as pyjwt
import pytest

from sessionauth.infra.jwt.jwt_token_codec import JWTTokenCodec
from sessionauth.services._shared.ports import ClaimSet, InvalidTokenError

CLAIMS = ClaimSet(owner_id=7, email="alice@example.com", is_admin=True)


@pytest.fixture()
def codec(app, app_ctx) -> JWTTokenCodec:
    return JWTTokenCodec(access_ttl=timedelta(minutes=15), refresh_ttl=timedelta(days=7))


def test_from_config_reads_lifetimes(app):
    codec = JWTTokenCodec.from_config(app.config)
    assert codec.access_lifetime == app.config["JWT_ACCESS_TOKEN_EXPIRES"]
    assert codec.refresh_ttl == app.config["JWT_REFRESH_TOKEN_EXPIRES"]


def test_access_token_round_trips_claims(codec, frozen_clock):
    token = codec.issue_access(CLAIMS)

    claims = codec.verify(token)

    assert claims.owner_id == 7
    assert claims.email == "alice@example.com"
    assert claims.is_admin is True
    assert claims.token_type == "access"
    assert claims.expires_at - claims.issued_at == timedelta(minutes=15)


def test_refresh_token_has_refresh_type_and_its_own_lifetime(codec, frozen_clock):
    token = codec.issue_refresh(CLAIMS)

    claims = codec.verify(token)

    assert claims.token_type == "refresh"
    assert codec.expiry_of(token) == datetime(2030, 1, 8, 12, 0, tzinfo=UTC)


def test_tokens_issued_in_the_same_instant_are_distinct(codec, frozen_clock):
    assert codec.issue_access(CLAIMS) != codec.issue_access(CLAIMS)


def test_verify_rejects_expired_token(codec, frozen_clock):
    token = codec.issue_access(CLAIMS)
    frozen_clock.tick(timedelta(minutes=15, seconds=1))

    with pytest.raises(InvalidTokenError):
        codec.verify(token)
    # Expiry can still be read without verification.
    assert codec.expiry_of(token) is not None


def test_verify_rejects_foreign_signature(codec):
    forged = pyjwt.encode(
        {"sub": "7", "type": "access", "jti": "x", "email": "a@b.co", "iat": 0, "exp": 2**31},
        "some-other-secret-of-reasonable-length",
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError):
        codec.verify(forged)


@pytest.mark.parametrize("token", ["", "not.a.jwt", "garbage"])
def test_verify_rejects_malformed_tokens(codec, token):
    with pytest.raises(InvalidTokenError):
        codec.verify(token)


def test_verify_rejects_payload_without_email(codec, app):
    token = pyjwt.encode(
        {"sub": "7", "type": "access", "jti": "x", "iat": 0, "exp": 2**31, "nbf": 0},
        app.config["JWT_SECRET_KEY"],
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError):
        codec.verify(token)


@pytest.mark.parametrize("token", ["", "garbage", pyjwt.encode({"sub": "1"}, "k" * 32, algorithm="HS256")])
def test_expiry_of_returns_none_when_absent_or_undecodable(codec, token):
    assert codec.expiry_of(token) is None
