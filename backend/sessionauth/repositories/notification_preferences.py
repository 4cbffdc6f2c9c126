"""Repository for per-user notification preferences."""

from __future__ import annotations

from sqlalchemy import select

from sessionauth.models.notification_preferences import NotificationPreferences
from sessionauth.repositories.base import BaseRepository


class NotificationPreferencesRepository(BaseRepository[NotificationPreferences]):
    """Rows are keyed by ``user_id``; there is no surrogate id."""

    model = NotificationPreferences

    def _pk_attr(self):
        return NotificationPreferences.user_id

    def _updatable_fields(self):
        return {
            "active_route",
            "travel_tips",
            "nearby_events",
            "available_narratives",
            "local_offers",
        }

    def exists_for_user(self, user_id: int) -> bool:
        stmt = select(NotificationPreferences.user_id).where(
            NotificationPreferences.user_id == user_id
        )
        return self.session.execute(stmt).first() is not None
