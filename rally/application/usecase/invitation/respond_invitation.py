"""Respond to invitation use case."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from rally.application.usecase.base import BaseUseCase
from rally.domain.service import InvitationService
from rally.domain.value import InvitationId, UserId


class InvitationResponse(str, Enum):
    """Answer to an invitation."""

    ACCEPT = "accept"
    DECLINE = "decline"


class RespondInvitationRequest(BaseModel):
    """Respond to invitation request."""

    user_id: str  # From authenticated user
    invitation_id: InvitationId
    response: InvitationResponse


class RespondInvitationResponse(BaseModel):
    """Respond to invitation response."""

    invitation_id: str
    activity_id: str
    status: str
    responded_at: datetime | None


class RespondInvitationUseCase(BaseUseCase):
    """Use case for accepting or declining an invitation.

    Accepting also joins the activity; if the activity cannot be joined the
    invitation stays pending.
    """

    def __init__(self, invitation_service: InvitationService) -> None:
        """Initialize respond invitation use case.

        Args:
            invitation_service: Invitation domain service
        """
        self.invitation_service = invitation_service

    async def execute(
        self, request: RespondInvitationRequest
    ) -> RespondInvitationResponse:
        """Execute respond flow.

        Raises:
            NotFoundError: If the invitation does not exist
            NotAuthorizedError: If the invitation is addressed to someone else
            InvalidTransitionError: If it was already answered
            BusinessRuleViolationError: If accepting and the activity cannot
                be joined
        """
        user_id = UserId(request.user_id)
        if request.response == InvitationResponse.ACCEPT:
            invitation = await self.invitation_service.accept(
                request.invitation_id, user_id
            )
        else:
            invitation = await self.invitation_service.decline(
                request.invitation_id, user_id
            )

        return RespondInvitationResponse(
            invitation_id=str(invitation.id),
            activity_id=str(invitation.activity_id),
            status=invitation.status.value,
            responded_at=invitation.responded_at,
        )
