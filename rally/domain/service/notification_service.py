"""Notification domain service.

Notifications are best-effort side effects. ``notify`` schedules delivery
as a background task and returns immediately; delivery failures are logged
and never reach the action that triggered them.
"""

import asyncio
from typing import Any
from uuid import uuid4

import logfire

from rally.config import NotificationSettings
from rally.domain.error import NotFoundError
from rally.domain.model.notification import Notification
from rally.domain.repository import NotificationRepository, NotificationSink
from rally.domain.value import NotificationId, NotificationType, UserId
from rally.util.time import utcnow

from .base import Service

# Strong references so pending deliveries are not garbage collected mid-flight
_pending_deliveries: set[asyncio.Task] = set()


async def drain_notifications() -> None:
    """Wait for every scheduled delivery to finish.

    Used on shutdown and in tests; delivery errors were already logged.
    """
    while _pending_deliveries:
        await asyncio.gather(*list(_pending_deliveries), return_exceptions=True)


class NotificationService(Service):
    """Domain service for the notification inbox."""

    def __init__(
        self,
        notification_repository: NotificationRepository,
        notification_sink: NotificationSink,
        settings: NotificationSettings,
    ) -> None:
        """Initialize notification service.

        Args:
            notification_repository: Inbox repository for reads and read flags
            notification_sink: Delivery channel for new notifications
            settings: Notification settings
        """
        self.notification_repository = notification_repository
        self.notification_sink = notification_sink
        self.settings = settings

    def notify(
        self,
        user_id: UserId,
        type: NotificationType,
        title: str,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> Notification:
        """Schedule delivery of a notification and return without waiting.

        Args:
            user_id: Recipient
            type: Notification type
            title: Short title
            message: Human-readable message
            metadata: References to the triggering entities

        Returns:
            The notification being delivered
        """
        notification = Notification(
            id=NotificationId(uuid4()),
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            metadata=metadata or {},
            read=False,
            created_at=utcnow(),
        )

        task = asyncio.get_running_loop().create_task(self._deliver(notification))
        _pending_deliveries.add(task)
        task.add_done_callback(_pending_deliveries.discard)
        return notification

    async def _deliver(self, notification: Notification) -> None:
        """Deliver one notification, logging instead of raising on failure."""
        try:
            await self.notification_sink.deliver(notification)
            logfire.info(
                "Notification delivered",
                notification_id=str(notification.id),
                user_id=notification.user_id,
                type=notification.type.value,
            )
        except Exception as e:
            logfire.warn(
                "Notification delivery failed",
                notification_id=str(notification.id),
                user_id=notification.user_id,
                type=notification.type.value,
                error=str(e),
                error_type=type(e).__name__,
            )

    def notify_friend_request(
        self, recipient_id: UserId, sender_id: UserId, sender_name: str
    ) -> Notification:
        """Tell a user someone sent them a friend request."""
        return self.notify(
            recipient_id,
            NotificationType.FRIEND_REQUEST,
            "New Friend Request",
            f"{sender_name} sent you a friend request",
            {"sender_id": sender_id, "sender_name": sender_name},
        )

    def notify_friend_request_accepted(
        self, requester_id: UserId, acceptor_id: UserId, acceptor_name: str
    ) -> Notification:
        """Tell the original requester their friend request was accepted."""
        return self.notify(
            requester_id,
            NotificationType.FRIEND_REQUEST_ACCEPTED,
            "Friend Request Accepted",
            f"{acceptor_name} accepted your friend request",
            {"acceptor_id": acceptor_id, "acceptor_name": acceptor_name},
        )

    def notify_activity_invitation(
        self,
        invitee_id: UserId,
        inviter_id: UserId,
        inviter_name: str,
        activity_id: str,
        activity_title: str,
        invitation_id: str,
    ) -> Notification:
        """Tell a friend they were invited to an activity."""
        return self.notify(
            invitee_id,
            NotificationType.ACTIVITY_INVITATION,
            "Activity Invitation",
            f"{inviter_name} invited you to {activity_title}",
            {
                "inviter_id": inviter_id,
                "inviter_name": inviter_name,
                "activity_id": activity_id,
                "activity_title": activity_title,
                "invitation_id": invitation_id,
            },
        )

    async def list_notifications(
        self, user_id: UserId, limit: int | None = None
    ) -> list[Notification]:
        """List a user's most recent notifications, newest first.

        Args:
            user_id: Inbox owner
            limit: Maximum results (defaults to the configured inbox size)

        Returns:
            Notifications
        """
        return await self.notification_repository.find_for_user(
            user_id, limit or self.settings.list_limit
        )

    async def unread_count(self, user_id: UserId) -> int:
        """Count a user's unread notifications."""
        return await self.notification_repository.count_unread(user_id)

    async def mark_read(self, notification_id: NotificationId, user_id: UserId) -> None:
        """Mark one of the user's notifications read.

        Raises:
            NotFoundError: If the user has no such notification
        """
        with logfire.span(
            "notification_service.mark_read",
            notification_id=str(notification_id),
            user_id=user_id,
        ):
            updated = await self.notification_repository.mark_read(
                notification_id, user_id
            )
            if not updated:
                raise NotFoundError("Notification", str(notification_id))

    async def mark_all_read(self, user_id: UserId) -> int:
        """Mark all of the user's notifications read.

        Returns:
            Number of notifications updated
        """
        with logfire.span("notification_service.mark_all_read", user_id=user_id):
            count = await self.notification_repository.mark_all_read(user_id)
            logfire.info("Notifications marked read", user_id=user_id, count=count)
            return count
