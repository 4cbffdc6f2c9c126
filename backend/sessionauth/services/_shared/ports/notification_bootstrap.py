"""Port for the post-registration notification-preference bootstrap."""

from __future__ import annotations

from typing import Protocol


class NotificationBootstrap(Protocol):
    """Create default notification preferences for a freshly registered user."""

    def create_defaults(self, owner_id: int) -> None: ...


class RecordingNotificationBootstrap(NotificationBootstrap):
    """Test double remembering which owners were bootstrapped.

    :param error: When set, raised from every call instead of recording.
    """

    def __init__(self, *, error: Exception | None = None) -> None:
        self.created: list[int] = []
        self.error = error

    def create_defaults(self, owner_id: int) -> None:
        if self.error is not None:
            raise self.error
        self.created.append(owner_id)
