"""In-memory notification repository and sink for testing."""

from rally.domain.model.notification import Notification
from rally.domain.repository.notification import (
    NotificationRepository,
    NotificationSink,
)
from rally.domain.value import NotificationId, UserId


class InMemoryNotificationRepository(NotificationRepository):
    """In-memory implementation of NotificationRepository for testing."""

    def __init__(self) -> None:
        self._notifications: dict[NotificationId, Notification] = {}

    async def save(self, notification: Notification) -> Notification:
        """Insert a notification."""
        self._notifications[notification.id] = notification
        return notification

    async def find_for_user(self, user_id: UserId, limit: int) -> list[Notification]:
        """Find a user's most recent notifications, newest first."""
        matches = [n for n in self._notifications.values() if n.user_id == user_id]
        matches.sort(key=lambda n: n.created_at, reverse=True)
        return matches[:limit]

    async def count_unread(self, user_id: UserId) -> int:
        """Count unread notifications."""
        return sum(
            1
            for n in self._notifications.values()
            if n.user_id == user_id and not n.read
        )

    async def mark_read(self, notification_id: NotificationId, user_id: UserId) -> bool:
        """Mark one notification read, only if the user owns it."""
        notification = self._notifications.get(notification_id)
        if notification is None or notification.user_id != user_id:
            return False
        self._notifications[notification_id] = notification.evolve(read=True)
        return True

    async def mark_all_read(self, user_id: UserId) -> int:
        """Mark every unread notification of a user read."""
        count = 0
        for notification in list(self._notifications.values()):
            if notification.user_id == user_id and not notification.read:
                self._notifications[notification.id] = notification.evolve(read=True)
                count += 1
        return count


class InMemoryNotificationSink(NotificationSink):
    """Delivers straight into an in-memory inbox.

    Set ``fail_with`` to simulate a broken delivery channel.
    """

    def __init__(self, repository: InMemoryNotificationRepository) -> None:
        self.repository = repository
        self.fail_with: Exception | None = None

    async def deliver(self, notification: Notification) -> None:
        """Store the notification in the shared in-memory inbox."""
        if self.fail_with is not None:
            raise self.fail_with
        await self.repository.save(notification)
