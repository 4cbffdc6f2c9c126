from sessionauth.models.notification_preferences import NotificationPreferences
from sessionauth.models.refresh_token import RefreshToken
from sessionauth.models.user import User

__all__ = [
    "NotificationPreferences",
    "RefreshToken",
    "User",
]
