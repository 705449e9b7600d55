"""Invitation routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request
from pydantic import BaseModel

from rally.application.usecase.invitation import (
    CancelInvitationUseCase,
    InvitationResponse,
    ListReceivedInvitationsUseCase,
    RespondInvitationUseCase,
)
from rally.application.usecase.invitation.cancel_invitation import (
    CancelInvitationRequest,
    CancelInvitationResponse,
)
from rally.application.usecase.invitation.list_invitations import (
    ListReceivedInvitationsRequest,
    ListReceivedInvitationsResponse,
)
from rally.application.usecase.invitation.respond_invitation import (
    RespondInvitationRequest,
    RespondInvitationResponse,
)
from rally.domain.service import JWTService
from rally.domain.value import InvitationId
from rally.interface.api.security import authenticate

router = APIRouter(prefix="/invitations", tags=["invitations"], route_class=DishkaRoute)


class RespondInvitationAPIRequest(BaseModel):
    """API request for answering an invitation."""

    response: InvitationResponse


@router.get("", response_model=ListReceivedInvitationsResponse)
async def list_received_invitations(
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    list_received_invitations_use_case: FromDishka[ListReceivedInvitationsUseCase],
) -> ListReceivedInvitationsResponse:
    """Pending invitations for the signed-in user."""
    token = authenticate(http_request, jwt_service)
    return await list_received_invitations_use_case.execute(
        ListReceivedInvitationsRequest(user_id=token.user_id)
    )


@router.post("/{invitation_id}/respond", response_model=RespondInvitationResponse)
async def respond_invitation(
    invitation_id: UUID,
    request: RespondInvitationAPIRequest,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    respond_invitation_use_case: FromDishka[RespondInvitationUseCase],
) -> RespondInvitationResponse:
    """Accept or decline an invitation.

    Example:
        POST /invitations/1b9e.../respond
        {"response": "accept"}
    """
    token = authenticate(http_request, jwt_service)
    return await respond_invitation_use_case.execute(
        RespondInvitationRequest(
            user_id=token.user_id,
            invitation_id=InvitationId(invitation_id),
            response=request.response,
        )
    )


@router.delete("/{invitation_id}", response_model=CancelInvitationResponse)
async def cancel_invitation(
    invitation_id: UUID,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    cancel_invitation_use_case: FromDishka[CancelInvitationUseCase],
) -> CancelInvitationResponse:
    """Withdraw a pending invitation (inviter only)."""
    token = authenticate(http_request, jwt_service)
    return await cancel_invitation_use_case.execute(
        CancelInvitationRequest(
            user_id=token.user_id, invitation_id=InvitationId(invitation_id)
        )
    )
