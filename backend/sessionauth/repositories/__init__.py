"""Repository package exposing persistence-layer access for the models."""

from __future__ import annotations

from sessionauth.repositories.base import BaseRepository
from sessionauth.repositories.notification_preferences import (
    NotificationPreferencesRepository,
)
from sessionauth.repositories.refresh_token import RefreshTokenRepository
from sessionauth.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    # Concrete
    "NotificationPreferencesRepository",
    "RefreshTokenRepository",
    "UserRepository",
]
