"""Join or leave an activity use case."""

from enum import Enum

from pydantic import BaseModel

from rally.application.usecase.common import ActivityItem, build_activity_items
from rally.domain.service import (
    ActivityService,
    FriendshipService,
    InvitationService,
    ProfileService,
)
from rally.domain.value import ActivityId, UserId


class ParticipationAction(str, Enum):
    """Participation change."""

    JOIN = "join"
    LEAVE = "leave"


class ChangeParticipationRequest(BaseModel):
    """Change participation request."""

    user_id: str  # From authenticated user
    activity_id: ActivityId
    action: ParticipationAction


class ChangeParticipationResponse(BaseModel):
    """Change participation response."""

    changed: bool
    activity: ActivityItem


class ChangeParticipationUseCase:
    """Use case for joining and leaving activities.

    Joining twice and leaving without having joined succeed with
    ``changed=False``. Activities the user may not see are reported as
    missing, as in the detail view.
    """

    def __init__(
        self,
        activity_service: ActivityService,
        friendship_service: FriendshipService,
        invitation_service: InvitationService,
        profile_service: ProfileService,
    ) -> None:
        """Initialize change participation use case.

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

    async def execute(
        self, request: ChangeParticipationRequest
    ) -> ChangeParticipationResponse:
        """Execute join or leave.

        Raises:
            NotFoundError: If the activity does not exist or is hidden
            BusinessRuleViolationError: With every reason the join is refused,
                or if the organizer tries to leave
        """
        user_id = UserId(request.user_id)
        await self.activity_service.ensure_visible(
            await self.activity_service.get_activity(request.activity_id),
            user_id,
            await self.friendship_service.friend_ids(user_id),
            await self.invitation_service.invited_activity_ids(user_id),
        )

        if request.action == ParticipationAction.JOIN:
            changed = await self.activity_service.join(request.activity_id, user_id)
        else:
            changed = await self.activity_service.leave(request.activity_id, user_id)

        activity = await self.activity_service.get_activity(request.activity_id)
        items = await build_activity_items(
            [activity], user_id, self.activity_service, self.profile_service
        )
        return ChangeParticipationResponse(changed=changed, activity=items[0])
