"""Mark notifications read use case."""

from pydantic import BaseModel

from rally.domain.service import NotificationService
from rally.domain.value import NotificationId, UserId


class MarkReadRequest(BaseModel):
    """Mark read request.

    Without a notification ID every notification of the user is marked.
    """

    user_id: str  # From authenticated user
    notification_id: NotificationId | None = None


class MarkReadResponse(BaseModel):
    """Mark read response."""

    updated: int
    unread_count: int


class MarkReadUseCase:
    """Use case for marking one or all notifications read."""

    def __init__(self, notification_service: NotificationService) -> None:
        self.notification_service = notification_service

    async def execute(self, request: MarkReadRequest) -> MarkReadResponse:
        """Execute mark read flow.

        Raises:
            NotFoundError: If the single notification does not belong to the user
        """
        user_id = UserId(request.user_id)
        if request.notification_id is not None:
            await self.notification_service.mark_read(request.notification_id, user_id)
            updated = 1
        else:
            updated = await self.notification_service.mark_all_read(user_id)

        unread = await self.notification_service.unread_count(user_id)
        return MarkReadResponse(updated=updated, unread_count=unread)
