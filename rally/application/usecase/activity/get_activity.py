"""Get activity use case."""

from pydantic import BaseModel

from rally.application.usecase.common import ActivityItem, build_activity_items
from rally.domain.model import Activity
from rally.domain.service import (
    ActivityService,
    FriendshipService,
    InvitationService,
    ProfileService,
)
from rally.domain.value import ActivityId, UserId


class GetActivityRequest(BaseModel):
    """Get activity request."""

    user_id: str  # From authenticated user
    activity_id: ActivityId


class GetActivityResponse(BaseModel):
    """Get activity response."""

    activity: ActivityItem


class GetActivityUseCase:
    """Use case for one activity's detail view.

    Activities the viewer may not see are reported as missing so their
    existence is not revealed.
    """

    def __init__(
        self,
        activity_service: ActivityService,
        friendship_service: FriendshipService,
        invitation_service: InvitationService,
        profile_service: ProfileService,
    ) -> None:
        """Initialize get activity use case.

        Args:
            activity_service: Activity domain service
            friendship_service: Friendship service for visibility checks
            invitation_service: Invitation service for visibility checks
            profile_service: Profile service for enrichment
        """
        self.activity_service = activity_service
        self.friendship_service = friendship_service
        self.invitation_service = invitation_service
        self.profile_service = profile_service

    async def _ensure_visible(self, activity: Activity, viewer_id: UserId) -> None:
        await self.activity_service.ensure_visible(
            activity,
            viewer_id,
            await self.friendship_service.friend_ids(viewer_id),
            await self.invitation_service.invited_activity_ids(viewer_id),
        )

    async def execute(self, request: GetActivityRequest) -> GetActivityResponse:
        """Execute get activity flow.

        Raises:
            NotFoundError: If the activity does not exist or is hidden
        """
        viewer_id = UserId(request.user_id)
        activity = await self.activity_service.get_activity(request.activity_id)
        await self._ensure_visible(activity, viewer_id)

        items = await build_activity_items(
            [activity], viewer_id, self.activity_service, self.profile_service
        )
        return GetActivityResponse(activity=items[0])
