"""Per-user notification switches created right after registration."""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, true
from sqlalchemy.orm import Mapped, mapped_column

from sessionauth.core.extensions import db

from .base import TimestampMixin

# Every switch starts enabled.
PREFERENCE_FLAGS = (
    "active_route",
    "travel_tips",
    "nearby_events",
    "available_narratives",
    "local_offers",
)


def _flag() -> Mapped[bool]:
    return mapped_column(Boolean, nullable=False, default=True, server_default=true())


class NotificationPreferences(TimestampMixin, db.Model):
    """Notification preferences keyed by the owning user (1:1)."""

    __tablename__ = "notification_preferences"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    active_route: Mapped[bool] = _flag()
    travel_tips: Mapped[bool] = _flag()
    nearby_events: Mapped[bool] = _flag()
    available_narratives: Mapped[bool] = _flag()
    local_offers: Mapped[bool] = _flag()

    def __repr__(self) -> str:
        return f"<NotificationPreferences user_id={self.user_id}>"
