"""Unit tests for NotificationPreferencesRepository."""

import pytest

from sessionauth.models.notification_preferences import (
    PREFERENCE_FLAGS,
    NotificationPreferences,
)
from sessionauth.repositories.notification_preferences import (
    NotificationPreferencesRepository,
)
from tests.factories.user import UserFactory


class TestNotificationPreferencesRepository:
    @pytest.fixture()
    def repo(self):
        return NotificationPreferencesRepository()

    def test_defaults_all_enabled_and_keyed_by_user(self, repo, session):
        user = UserFactory()
        assert not repo.exists_for_user(user.id)

        repo.add(NotificationPreferences(user_id=user.id))
        session.commit()

        prefs = repo.get(user.id)
        assert repo.exists_for_user(user.id)
        assert all(getattr(prefs, flag) is True for flag in PREFERENCE_FLAGS)

    def test_only_flags_are_updatable(self, repo, session):
        user = UserFactory()
        prefs = repo.add(NotificationPreferences(user_id=user.id))

        repo.assign_updates(prefs, {"travel_tips": False})
        assert prefs.travel_tips is False
        with pytest.raises(ValueError):
            repo.assign_updates(prefs, {"user_id": 99})
