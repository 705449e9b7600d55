"""Get profile use case."""

from pydantic import BaseModel

from rally.application.usecase.base import BaseUseCase
from rally.application.usecase.common import PersonItem, build_person
from rally.domain.service import FriendshipService, ProfileService
from rally.domain.value import RelationshipStatus, UserId


class GetProfileRequest(BaseModel):
    """Get profile request."""

    user_id: str  # From authenticated user
    target_user_id: str | None = None  # Defaults to the user themself


class GetProfileResponse(BaseModel):
    """Get profile response."""

    profile: PersonItem
    is_self: bool
    relationship: RelationshipStatus
    friend_count: int


class GetProfileUseCase(BaseUseCase):
    """Use case for viewing a profile together with the viewer's relationship."""

    def __init__(
        self, profile_service: ProfileService, friendship_service: FriendshipService
    ) -> None:
        """Initialize get profile use case.

        Args:
            profile_service: Profile domain service
            friendship_service: Friendship service for relationship and counts
        """
        self.profile_service = profile_service
        self.friendship_service = friendship_service

    async def execute(self, request: GetProfileRequest) -> GetProfileResponse:
        """Execute get profile flow.

        Raises:
            NotFoundError: If the target has no profile
        """
        viewer = UserId(request.user_id)
        target = UserId(request.target_user_id or request.user_id)

        profile = await self.profile_service.get_profile(target)
        graph = await self.friendship_service.get_graph(target)

        if target == viewer:
            relationship = RelationshipStatus.NONE
        else:
            # Seen from the viewer's side
            viewer_graph = await self.friendship_service.get_graph(viewer)
            relationship = viewer_graph.status_with(target)

        return GetProfileResponse(
            profile=await build_person(self.profile_service, profile),
            is_self=target == viewer,
            relationship=relationship,
            friend_count=len(graph.friend_ids),
        )
