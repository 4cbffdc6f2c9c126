"""Notification-preference bootstrap run right after registration."""

from .service import NotificationPreferencesService

__all__ = ["NotificationPreferencesService"]
