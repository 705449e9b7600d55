"""Transfer activity ownership use case."""

from pydantic import BaseModel

from rally.application.usecase.common import ActivityItem, build_activity_items
from rally.domain.service import ActivityService, ProfileService
from rally.domain.value import ActivityId, UserId


class TransferOwnershipRequest(BaseModel):
    """Transfer ownership request."""

    user_id: str  # From authenticated user
    activity_id: ActivityId
    new_owner_id: str


class TransferOwnershipResponse(BaseModel):
    """Transfer ownership response."""

    activity: ActivityItem


class TransferOwnershipUseCase:
    """Use case for handing an activity to one of its participants."""

    def __init__(
        self, activity_service: ActivityService, profile_service: ProfileService
    ) -> None:
        """Initialize transfer ownership use case.

        Args:
            activity_service: Activity domain service
            profile_service: Profile service for enrichment
        """
        self.activity_service = activity_service
        self.profile_service = profile_service

    async def execute(
        self, request: TransferOwnershipRequest
    ) -> TransferOwnershipResponse:
        """Execute transfer ownership flow.

        Raises:
            NotFoundError: If the activity does not exist
            NotAuthorizedError: If the user is not the organizer
            BusinessRuleViolationError: If the new owner is not a participant
        """
        user_id = UserId(request.user_id)
        transferred = await self.activity_service.transfer_ownership(
            request.activity_id, user_id, UserId(request.new_owner_id)
        )

        items = await build_activity_items(
            [transferred], user_id, self.activity_service, self.profile_service
        )
        return TransferOwnershipResponse(activity=items[0])
