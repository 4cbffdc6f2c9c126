"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AccessTokenSchema,
    AuthResultSchema,
    ChangePasswordSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    SessionSchema,
    UserPublicSchema,
    ValidateTokenSchema,
)

__all__ = [
    "LoginSchema",
    "RegisterSchema",
    "RefreshSchema",
    "ChangePasswordSchema",
    "ValidateTokenSchema",
    "UserPublicSchema",
    "AuthResultSchema",
    "AccessTokenSchema",
    "SessionSchema",
]
