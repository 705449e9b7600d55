"""List my activities use case."""

from pydantic import BaseModel

from rally.application.usecase.common import ActivityItem, build_activity_items
from rally.domain.service import ActivityService, ProfileService
from rally.domain.value import UserId


class ListMyActivitiesRequest(BaseModel):
    """List my activities request."""

    user_id: str  # From authenticated user
    include_cancelled: bool = False


class ListMyActivitiesResponse(BaseModel):
    """List my activities response (calendar view)."""

    created: list[ActivityItem]
    joined: list[ActivityItem]


class ListMyActivitiesUseCase:
    """Use case for the activities a user organizes or joined."""

    def __init__(
        self, activity_service: ActivityService, profile_service: ProfileService
    ) -> None:
        """Initialize list my activities use case.

        Args:
            activity_service: Activity domain service
            profile_service: Profile service for enrichment
        """
        self.activity_service = activity_service
        self.profile_service = profile_service

    async def execute(
        self, request: ListMyActivitiesRequest
    ) -> ListMyActivitiesResponse:
        """Execute list my activities flow.

        Returns:
            Created and joined activities, each soonest first
        """
        user_id = UserId(request.user_id)
        created = await self.activity_service.list_created(
            user_id, include_cancelled=request.include_cancelled
        )
        joined = await self.activity_service.list_joined(user_id)
        if not request.include_cancelled:
            joined = [activity for activity in joined if not activity.is_cancelled]

        # Enrich both lists in one batch
        items = await build_activity_items(
            created + joined, user_id, self.activity_service, self.profile_service
        )
        return ListMyActivitiesResponse(
            created=items[: len(created)], joined=items[len(created) :]
        )
