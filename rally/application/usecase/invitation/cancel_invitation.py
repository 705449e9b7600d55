"""Cancel invitation use case."""

from pydantic import BaseModel

from rally.domain.service import InvitationService
from rally.domain.value import InvitationId, UserId


class CancelInvitationRequest(BaseModel):
    """Cancel invitation request."""

    user_id: str  # From authenticated user
    invitation_id: InvitationId


class CancelInvitationResponse(BaseModel):
    """Cancel invitation response."""

    success: bool
    message: str


class CancelInvitationUseCase:
    """Use case for withdrawing a pending invitation."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(
        self, request: CancelInvitationRequest
    ) -> CancelInvitationResponse:
        """Execute cancel invitation flow."""
        await self.invitation_service.cancel(
            request.invitation_id, UserId(request.user_id)
        )
        return CancelInvitationResponse(success=True, message="Invitation cancelled")
