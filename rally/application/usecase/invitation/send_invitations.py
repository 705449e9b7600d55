"""Send activity invitations use case."""

from pydantic import BaseModel, Field

from rally.application.usecase.base import BaseUseCase
from rally.domain.service import InvitationService
from rally.domain.value import ActivityId, UserId


class SendInvitationsRequest(BaseModel):
    """Send invitations request."""

    user_id: str  # From authenticated user
    activity_id: ActivityId
    invitee_ids: list[str] = Field(min_length=1, max_length=100)


class SendInvitationsResponse(BaseModel):
    """Send invitations response.

    Invitees are processed one by one, so a single response can contain
    both successes and failures.
    """

    invited_user_ids: list[str]
    failed: dict[str, str]


class SendInvitationsUseCase(BaseUseCase):
    """Use case for inviting friends to an activity."""

    def __init__(self, invitation_service: InvitationService) -> None:
        """Initialize send invitations use case.

        Args:
            invitation_service: Invitation domain service
        """
        self.invitation_service = invitation_service

    async def execute(self, request: SendInvitationsRequest) -> SendInvitationsResponse:
        """Execute send invitations flow.

        Raises:
            NotFoundError: If the activity does not exist
            NotAuthorizedError: If the user is not the organizer
            InvalidTransitionError: If the activity is cancelled
        """
        created, failed = await self.invitation_service.send_invitations(
            request.activity_id,
            UserId(request.user_id),
            [UserId(uid) for uid in request.invitee_ids],
        )
        return SendInvitationsResponse(
            invited_user_ids=[inv.invited_user_id for inv in created],
            failed=dict(failed),
        )
