"""Activity routes."""

from datetime import datetime
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, Request, status
from pydantic import BaseModel, Field

from rally.application.usecase.activity import (
    CancelActivityUseCase,
    ChangeParticipationUseCase,
    CreateActivityUseCase,
    GetActivityUseCase,
    GetFeedUseCase,
    ListMyActivitiesUseCase,
    ParticipationAction,
    TransferOwnershipUseCase,
    UpdateActivityUseCase,
)
from rally.application.usecase.activity.cancel_activity import (
    CancelActivityRequest,
    CancelActivityResponse,
)
from rally.application.usecase.activity.change_participation import (
    ChangeParticipationRequest,
    ChangeParticipationResponse,
)
from rally.application.usecase.activity.create_activity import (
    CreateActivityRequest,
    CreateActivityResponse,
)
from rally.application.usecase.activity.get_activity import (
    GetActivityRequest,
    GetActivityResponse,
)
from rally.application.usecase.activity.get_feed import GetFeedRequest, GetFeedResponse
from rally.application.usecase.activity.list_my_activities import (
    ListMyActivitiesRequest,
    ListMyActivitiesResponse,
)
from rally.application.usecase.activity.transfer_ownership import (
    TransferOwnershipRequest,
    TransferOwnershipResponse,
)
from rally.application.usecase.activity.update_activity import (
    UpdateActivityRequest,
    UpdateActivityResponse,
)
from rally.application.usecase.invitation import (
    ListSentInvitationsUseCase,
    SendInvitationsUseCase,
)
from rally.application.usecase.invitation.list_invitations import (
    ListSentInvitationsRequest,
    ListSentInvitationsResponse,
)
from rally.application.usecase.invitation.send_invitations import (
    SendInvitationsRequest,
    SendInvitationsResponse,
)
from rally.domain.service import JWTService
from rally.domain.value import ActivityId, ActivityType, Location, VisibilityChoice
from rally.interface.api.security import authenticate

router = APIRouter(prefix="/activities", tags=["activities"], route_class=DishkaRoute)


class CreateActivityAPIRequest(BaseModel):
    """API request for creating an activity."""

    title: str = Field(max_length=1000)
    starts_at: datetime
    max_participants: int | None = None
    visibility: VisibilityChoice = VisibilityChoice.ALL_FRIENDS
    activity_type: ActivityType = ActivityType.OTHER
    description: str | None = Field(default=None, max_length=5000)
    location: Location | None = None
    distance: str | None = Field(default=None, max_length=50)
    duration: str | None = Field(default=None, max_length=50)
    invitee_ids: list[str] = Field(default_factory=list, max_length=100)


class UpdateActivityAPIRequest(BaseModel):
    """API request for editing an activity; omitted fields stay unchanged."""

    title: str | None = Field(default=None, max_length=1000)
    description: str | None = Field(default=None, max_length=5000)
    starts_at: datetime | None = None
    location: Location | None = None
    activity_type: ActivityType | None = None
    max_participants: int | None = None
    distance: str | None = Field(default=None, max_length=50)
    duration: str | None = Field(default=None, max_length=50)


class TransferOwnershipAPIRequest(BaseModel):
    """API request for handing over an activity."""

    new_owner_id: str


class SendInvitationsAPIRequest(BaseModel):
    """API request for inviting friends."""

    invitee_ids: list[str] = Field(min_length=1, max_length=100)


@router.post(
    "", response_model=CreateActivityResponse, status_code=status.HTTP_201_CREATED
)
async def create_activity(
    request: CreateActivityAPIRequest,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    create_activity_use_case: FromDishka[CreateActivityUseCase],
) -> CreateActivityResponse:
    """Create an activity.

    Example:
        POST /activities
        {
            "title": "Sunday long run",
            "starts_at": "2026-05-03T08:00:00Z",
            "max_participants": 6,
            "visibility": "specific-friends",
            "activity_type": "running",
            "invitee_ids": ["8d0f..."]
        }
    """
    token = authenticate(http_request, jwt_service)
    return await create_activity_use_case.execute(
        CreateActivityRequest(user_id=token.user_id, **request.model_dump())
    )


@router.get("/feed", response_model=GetFeedResponse)
async def get_feed(
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    get_feed_use_case: FromDishka[GetFeedUseCase],
    days_ahead: int | None = Query(default=None, ge=1),
) -> GetFeedResponse:
    """Upcoming activities from friends, public ones and invitations."""
    token = authenticate(http_request, jwt_service)
    return await get_feed_use_case.execute(
        GetFeedRequest(user_id=token.user_id, days_ahead=days_ahead)
    )


@router.get("/mine", response_model=ListMyActivitiesResponse)
async def list_my_activities(
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    list_my_activities_use_case: FromDishka[ListMyActivitiesUseCase],
    include_cancelled: bool = False,
) -> ListMyActivitiesResponse:
    """Activities the user organizes or joined."""
    token = authenticate(http_request, jwt_service)
    return await list_my_activities_use_case.execute(
        ListMyActivitiesRequest(
            user_id=token.user_id, include_cancelled=include_cancelled
        )
    )


@router.get("/{activity_id}", response_model=GetActivityResponse)
async def get_activity(
    activity_id: UUID,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    get_activity_use_case: FromDishka[GetActivityUseCase],
) -> GetActivityResponse:
    """Get one activity with participants and the viewer's options."""
    token = authenticate(http_request, jwt_service)
    return await get_activity_use_case.execute(
        GetActivityRequest(user_id=token.user_id, activity_id=ActivityId(activity_id))
    )


@router.patch("/{activity_id}", response_model=UpdateActivityResponse)
async def update_activity(
    activity_id: UUID,
    request: UpdateActivityAPIRequest,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    update_activity_use_case: FromDishka[UpdateActivityUseCase],
) -> UpdateActivityResponse:
    """Edit an activity (organizer only)."""
    token = authenticate(http_request, jwt_service)
    return await update_activity_use_case.execute(
        UpdateActivityRequest(
            user_id=token.user_id,
            activity_id=ActivityId(activity_id),
            # Only forward what the client sent so omitted fields stay unset
            **request.model_dump(exclude_unset=True),
        )
    )


@router.post("/{activity_id}/cancel", response_model=CancelActivityResponse)
async def cancel_activity(
    activity_id: UUID,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    cancel_activity_use_case: FromDishka[CancelActivityUseCase],
) -> CancelActivityResponse:
    """Cancel an activity (organizer only)."""
    token = authenticate(http_request, jwt_service)
    return await cancel_activity_use_case.execute(
        CancelActivityRequest(user_id=token.user_id, activity_id=ActivityId(activity_id))
    )


@router.post("/{activity_id}/transfer", response_model=TransferOwnershipResponse)
async def transfer_ownership(
    activity_id: UUID,
    request: TransferOwnershipAPIRequest,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    transfer_ownership_use_case: FromDishka[TransferOwnershipUseCase],
) -> TransferOwnershipResponse:
    """Hand the activity over to one of its participants."""
    token = authenticate(http_request, jwt_service)
    return await transfer_ownership_use_case.execute(
        TransferOwnershipRequest(
            user_id=token.user_id,
            activity_id=ActivityId(activity_id),
            new_owner_id=request.new_owner_id,
        )
    )


@router.post("/{activity_id}/join", response_model=ChangeParticipationResponse)
async def join_activity(
    activity_id: UUID,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    change_participation_use_case: FromDishka[ChangeParticipationUseCase],
) -> ChangeParticipationResponse:
    """Join an activity.

    A refused join answers 409 with every reason in ``errors``.
    """
    token = authenticate(http_request, jwt_service)
    return await change_participation_use_case.execute(
        ChangeParticipationRequest(
            user_id=token.user_id,
            activity_id=ActivityId(activity_id),
            action=ParticipationAction.JOIN,
        )
    )


@router.post("/{activity_id}/leave", response_model=ChangeParticipationResponse)
async def leave_activity(
    activity_id: UUID,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    change_participation_use_case: FromDishka[ChangeParticipationUseCase],
) -> ChangeParticipationResponse:
    """Leave an activity."""
    token = authenticate(http_request, jwt_service)
    return await change_participation_use_case.execute(
        ChangeParticipationRequest(
            user_id=token.user_id,
            activity_id=ActivityId(activity_id),
            action=ParticipationAction.LEAVE,
        )
    )


@router.post("/{activity_id}/invitations", response_model=SendInvitationsResponse)
async def send_invitations(
    activity_id: UUID,
    request: SendInvitationsAPIRequest,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    send_invitations_use_case: FromDishka[SendInvitationsUseCase],
) -> SendInvitationsResponse:
    """Invite friends to an activity (organizer only)."""
    token = authenticate(http_request, jwt_service)
    return await send_invitations_use_case.execute(
        SendInvitationsRequest(
            user_id=token.user_id,
            activity_id=ActivityId(activity_id),
            invitee_ids=request.invitee_ids,
        )
    )


@router.get("/{activity_id}/invitations", response_model=ListSentInvitationsResponse)
async def list_sent_invitations(
    activity_id: UUID,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    list_sent_invitations_use_case: FromDishka[ListSentInvitationsUseCase],
) -> ListSentInvitationsResponse:
    """Invitations sent for an activity and their answers (organizer only)."""
    token = authenticate(http_request, jwt_service)
    return await list_sent_invitations_use_case.execute(
        ListSentInvitationsRequest(
            user_id=token.user_id, activity_id=ActivityId(activity_id)
        )
    )
