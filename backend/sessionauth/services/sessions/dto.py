# sessionauth/services/sessions/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param identifier: Email address or username.
    :type identifier: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    identifier: str
    password: str


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param email: Login email (normalized by the directory).
    :type email: str
    :param password: Raw password; checked against the strength policy.
    :type password: str
    """

    email: str
    password: str
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    profile_picture_url: str | None = None


@dataclass(frozen=True, slots=True)
class ChangePasswordIn:
    """
    Input DTO for a password change.

    :param owner_id: Authenticated user id.
    :param current_password: Password the caller claims to have.
    :param new_password: Replacement password (raw).
    """

    owner_id: int
    current_password: str
    new_password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe projection of a user. Never carries the password hash.
    """

    id: int
    email: str
    username: str | None
    first_name: str | None
    last_name: str | None
    profile_picture_url: str | None
    is_admin: bool
    enabled: bool


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """
    Result of login and registration.

    :param access_token: Encoded access JWT.
    :param refresh_token: Encoded refresh JWT.
    :param user: Public user projection.
    :param expires_in: Access-token lifetime in seconds.
    """

    access_token: str
    refresh_token: str
    user: UserPublicOut
    expires_in: int


@dataclass(frozen=True, slots=True)
class AccessTokenOut:
    """Result of a refresh: a new access token only."""

    access_token: str
    expires_in: int


@dataclass(frozen=True, slots=True)
class SessionOut:
    """One active session as shown to its owner (timestamps only)."""

    token_id: int
    created_at: datetime
    expires_at: datetime
