"""Notification repository and sink interfaces."""

from abc import ABC, abstractmethod

from rally.domain.model.notification import Notification
from rally.domain.value import NotificationId, UserId


class NotificationRepository(ABC):
    """Repository for a user's notification inbox."""

    @abstractmethod
    async def save(self, notification: Notification) -> Notification:
        """Insert a notification.

        Args:
            notification: The notification to store

        Returns:
            The stored notification
        """
        pass

    @abstractmethod
    async def find_for_user(self, user_id: UserId, limit: int) -> list[Notification]:
        """Find a user's most recent notifications, newest first.

        Args:
            user_id: Inbox owner
            limit: Maximum number of results

        Returns:
            Notifications
        """
        pass

    @abstractmethod
    async def count_unread(self, user_id: UserId) -> int:
        """Count unread notifications.

        Args:
            user_id: Inbox owner

        Returns:
            Number of unread notifications
        """
        pass

    @abstractmethod
    async def mark_read(self, notification_id: NotificationId, user_id: UserId) -> bool:
        """Mark one notification read, only if the user owns it.

        Args:
            notification_id: The notification
            user_id: Inbox owner

        Returns:
            True if a notification was updated
        """
        pass

    @abstractmethod
    async def mark_all_read(self, user_id: UserId) -> int:
        """Mark every unread notification of a user read.

        Args:
            user_id: Inbox owner

        Returns:
            Number of notifications updated
        """
        pass


class NotificationSink(ABC):
    """Append-only delivery channel for notifications.

    Runs outside the triggering request's transaction so a failing or slow
    delivery never affects the action that caused it.
    """

    @abstractmethod
    async def deliver(self, notification: Notification) -> None:
        """Store a notification in its recipient's inbox.

        Args:
            notification: The notification to deliver
        """
        pass
