# sessionauth/services/notifications/service.py
from __future__ import annotations

import logging

from sessionauth.models.notification_preferences import NotificationPreferences
from sessionauth.services._shared.base import BaseService
from sessionauth.services._shared.errors import ConflictError

log = logging.getLogger(__name__)


class NotificationPreferencesService(BaseService):
    """
    Persist the default notification switches for a user.

    Satisfies the ``NotificationBootstrap`` port used by
    :class:`~sessionauth.services.sessions.SessionService`.
    """

    def create_defaults(self, owner_id: int) -> None:
        """
        Create the preferences row with every switch enabled.

        :param owner_id: Freshly registered user id.
        :raises ConflictError: A preferences row already exists for the user.
        """
        with self.rw_uow() as uow:
            if uow.notification_preferences.exists_for_user(owner_id):
                raise ConflictError("NotificationPreferences", "already initialized")
            uow.notification_preferences.add(NotificationPreferences(user_id=owner_id))
        log.debug("notifications.defaults_created", extra={"owner_id": owner_id})
