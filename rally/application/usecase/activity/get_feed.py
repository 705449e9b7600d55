"""Get activity feed use case."""

from pydantic import BaseModel, Field

from rally.application.usecase.base import BaseUseCase
from rally.application.usecase.common import ActivityItem, build_activity_items
from rally.domain.service import (
    ActivityService,
    FriendshipService,
    InvitationService,
    ProfileService,
)
from rally.domain.value import UserId


class GetFeedRequest(BaseModel):
    """Get feed request."""

    user_id: str  # From authenticated user
    days_ahead: int | None = Field(default=None, ge=1)


class GetFeedResponse(BaseModel):
    """Get feed response."""

    activities: list[ActivityItem]
    total: int


class GetFeedUseCase(BaseUseCase):
    """Use case for the upcoming-activities feed.

    Shows activities in the coming days that the user can see: public ones,
    friends-only ones organized by friends, and ones they were invited to.
    The user's own activities are left out.
    """

    def __init__(
        self,
        activity_service: ActivityService,
        friendship_service: FriendshipService,
        invitation_service: InvitationService,
        profile_service: ProfileService,
    ) -> None:
        """Initialize get feed use case.

        Args:
            activity_service: Activity domain service
            friendship_service: Friendship service for the friend set
            invitation_service: Invitation service for invited activities
            profile_service: Profile service for enrichment
        """
        self.activity_service = activity_service
        self.friendship_service = friendship_service
        self.invitation_service = invitation_service
        self.profile_service = profile_service

    async def execute(self, request: GetFeedRequest) -> GetFeedResponse:
        """Execute get feed flow.

        Args:
            request: Viewer and optional window size in days

        Returns:
            Visible upcoming activities, soonest first
        """
        user_id = UserId(request.user_id)
        friend_ids = await self.friendship_service.friend_ids(user_id)
        invited = await self.invitation_service.invited_activity_ids(user_id)

        activities = await self.activity_service.feed(
            user_id, friend_ids, invited, days_ahead=request.days_ahead
        )
        items = await build_activity_items(
            activities, user_id, self.activity_service, self.profile_service
        )
        return GetFeedResponse(activities=items, total=len(items))
