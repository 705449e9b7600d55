"""List notifications use case."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from rally.domain.service import NotificationService
from rally.domain.value import UserId
from rally.util.time import format_time_ago, utcnow


class NotificationItem(BaseModel):
    """A notification as shown in the inbox."""

    notification_id: str
    type: str
    title: str
    message: str
    metadata: dict[str, Any]
    read: bool
    created_at: datetime
    time_ago: str


class ListNotificationsRequest(BaseModel):
    """List notifications request."""

    user_id: str  # From authenticated user
    limit: int | None = Field(default=None, ge=1, le=100)


class ListNotificationsResponse(BaseModel):
    """List notifications response."""

    notifications: list[NotificationItem]
    unread_count: int


class ListNotificationsUseCase:
    """Use case for the notification inbox."""

    def __init__(self, notification_service: NotificationService) -> None:
        """Initialize list notifications use case.

        Args:
            notification_service: Notification domain service
        """
        self.notification_service = notification_service

    async def execute(
        self, request: ListNotificationsRequest
    ) -> ListNotificationsResponse:
        """Execute list notifications flow.

        Returns:
            Latest notifications, newest first, and the total unread count
        """
        user_id = UserId(request.user_id)
        notifications = await self.notification_service.list_notifications(
            user_id, request.limit
        )
        unread = await self.notification_service.unread_count(user_id)

        now = utcnow()
        return ListNotificationsResponse(
            notifications=[
                NotificationItem(
                    notification_id=str(n.id),
                    type=n.type.value,
                    title=n.title,
                    message=n.message,
                    metadata=n.metadata,
                    read=n.read,
                    created_at=n.created_at,
                    time_ago=format_time_ago(n.created_at, now),
                )
                for n in notifications
            ],
            unread_count=unread,
        )
