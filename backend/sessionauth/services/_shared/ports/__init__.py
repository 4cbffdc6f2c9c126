"""
sessionauth.services._shared.ports
==================================

Collection of *ports* (hexagonal interfaces) the session service depends on.

Modules
-------
- :mod:`token_codec`:
    :class:`~.TokenCodec` signs and verifies access/refresh tokens.
- :mod:`session_store`:
    :class:`~.SessionStore` persists refresh-token records by digest.
- :mod:`user_directory`:
    :class:`~.UserDirectory` looks up and updates user accounts.
- :mod:`notification_bootstrap`:
    :class:`~.NotificationBootstrap` seeds notification preferences.

Concrete adapters live under ``sessionauth.infra`` (SQL, Redis, JWT) and
``sessionauth.services.notifications``. Each port module also ships an
in-memory double for unit tests.
"""

from __future__ import annotations

from .notification_bootstrap import NotificationBootstrap, RecordingNotificationBootstrap
from .session_store import (
    InMemorySessionStore,
    RefreshTokenRecord,
    SessionStore,
    digest_token,
)
from .token_codec import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    ClaimSet,
    InvalidTokenError,
    StubTokenCodec,
    TokenClaims,
    TokenCodec,
)
from .user_directory import InMemoryUserDirectory, NewUser, UserDirectory, UserRecord

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "REFRESH_TOKEN_TYPE",
    "ClaimSet",
    "InMemorySessionStore",
    "InMemoryUserDirectory",
    "InvalidTokenError",
    "NewUser",
    "NotificationBootstrap",
    "RecordingNotificationBootstrap",
    "RefreshTokenRecord",
    "SessionStore",
    "StubTokenCodec",
    "TokenClaims",
    "TokenCodec",
    "UserDirectory",
    "UserRecord",
    "digest_token",
]
