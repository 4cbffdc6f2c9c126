"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`sessionauth.services` without knowing internal
structure.

Re-exports
----------
- Base primitives (from ``sessionauth.services._shared.base``)
    * :class:`BaseService`

- Error taxonomy (from ``sessionauth.services._shared.errors``)
    * :class:`ServiceError` and its four variants

- Session service (from ``sessionauth.services.sessions``)
    * :class:`SessionService`
    * DTOs: :class:`LoginIn`, :class:`RegisterIn`, :class:`ChangePasswordIn`,
      :class:`UserPublicOut`, :class:`AuthResultOut`, :class:`AccessTokenOut`,
      :class:`SessionOut`

The composition root wiring adapters into :class:`SessionService` lives in
:mod:`sessionauth.services.provider`.
"""

from __future__ import annotations

# Base primitive
from ._shared.base import BaseService
from ._shared.errors import (
    AuthenticationError,
    ConflictError,
    ErrorKind,
    NotFoundError,
    ServiceError,
    ValidationError,
)

# Session service + DTOs
from .sessions import (
    AccessTokenOut,
    AuthResultOut,
    ChangePasswordIn,
    LoginIn,
    RegisterIn,
    SessionOut,
    SessionService,
    UserPublicOut,
)

__all__ = [
    # Base
    "BaseService",
    # Errors
    "ErrorKind",
    "ServiceError",
    "AuthenticationError",
    "ConflictError",
    "ValidationError",
    "NotFoundError",
    # Sessions
    "SessionService",
    "LoginIn",
    "RegisterIn",
    "ChangePasswordIn",
    "UserPublicOut",
    "AuthResultOut",
    "AccessTokenOut",
    "SessionOut",
]
