"""Session lifecycle: login, registration, refresh, logout and password change."""

from .dto import (
    AccessTokenOut,
    AuthResultOut,
    ChangePasswordIn,
    LoginIn,
    RegisterIn,
    SessionOut,
    UserPublicOut,
)
from .service import SessionService, to_user_public

__all__ = [
    "SessionService",
    "to_user_public",
    "LoginIn",
    "RegisterIn",
    "ChangePasswordIn",
    "UserPublicOut",
    "AuthResultOut",
    "AccessTokenOut",
    "SessionOut",
]
