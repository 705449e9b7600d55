"""Cancel activity use case."""

from pydantic import BaseModel

from rally.domain.service import ActivityService
from rally.domain.value import ActivityId, UserId


class CancelActivityRequest(BaseModel):
    """Cancel activity request."""

    user_id: str  # From authenticated user
    activity_id: ActivityId


class CancelActivityResponse(BaseModel):
    """Cancel activity response."""

    activity_id: str
    status: str


class CancelActivityUseCase:
    """Use case for cancelling an activity.

    The activity stays stored with status ``cancelled``; it drops out of
    feeds and can no longer be joined.
    """

    def __init__(self, activity_service: ActivityService) -> None:
        self.activity_service = activity_service

    async def execute(self, request: CancelActivityRequest) -> CancelActivityResponse:
        """Execute cancel activity flow."""
        cancelled = await self.activity_service.cancel_activity(
            request.activity_id, UserId(request.user_id)
        )
        return CancelActivityResponse(
            activity_id=str(cancelled.id), status=cancelled.status.value
        )
