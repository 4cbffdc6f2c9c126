"""Composition root building the :class:`SessionService` for an app."""

from __future__ import annotations

import logging

from flask import Flask, current_app

from sessionauth.infra.jwt.jwt_token_codec import JWTTokenCodec
from sessionauth.infra.sql.sql_session_store import SQLSessionStore
from sessionauth.infra.sql.sql_user_directory import SQLUserDirectory
from sessionauth.services._shared.ports.session_store import SessionStore
from sessionauth.services.credentials import CredentialHasher, PasswordPolicy
from sessionauth.services.notifications import NotificationPreferencesService
from sessionauth.services.sessions import SessionService

log = logging.getLogger(__name__)

EXTENSION_KEY = "session_service"


def build_session_store(app: Flask) -> SessionStore:
    """
    Select the session store named by ``SESSION_STORE_BACKEND``.

    :raises RuntimeError: Unknown backend, or ``redis`` without a client.
    """
    backend = str(app.config.get("SESSION_STORE_BACKEND", "sql")).lower()
    if backend == "sql":
        return SQLSessionStore()
    if backend == "redis":
        from sessionauth.core.extensions import get_redis
        from sessionauth.infra.redis.redis_session_store import RedisSessionStore

        return RedisSessionStore(get_redis())
    raise RuntimeError(f"Unknown SESSION_STORE_BACKEND {backend!r}")


def build_session_service(app: Flask) -> SessionService:
    """Wire the configured adapters into a fresh :class:`SessionService`."""
    config = app.config
    service = SessionService(
        users=SQLUserDirectory(),
        store=build_session_store(app),
        codec=JWTTokenCodec.from_config(config),
        hasher=CredentialHasher(config.get("PASSWORD_HASH_METHOD", "scrypt")),
        policy=PasswordPolicy(
            min_length=int(config.get("PASSWORD_MIN_LENGTH", 6)),
            max_length=int(config.get("PASSWORD_MAX_LENGTH", 255)),
        ),
        notifications=NotificationPreferencesService(),
    )
    log.debug("session_service.built: store=%s", type(service.store).__name__)
    return service


def get_session_service() -> SessionService:
    """Return the service cached on ``current_app``, building it on first use."""
    app = current_app._get_current_object()  # type: ignore[attr-defined]
    service = app.extensions.get(EXTENSION_KEY)
    if service is None:
        service = build_session_service(app)
        app.extensions[EXTENSION_KEY] = service
    return service
