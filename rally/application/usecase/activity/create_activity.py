"""Create activity use case."""

from datetime import datetime

from pydantic import BaseModel, Field

from rally.application.usecase.common import ActivityItem, build_activity_items
from rally.domain.error import ValidationError
from rally.domain.service import ActivityService, InvitationService, ProfileService
from rally.domain.value import ActivityType, Location, UserId, VisibilityChoice


class CreateActivityRequest(BaseModel):
    """Create activity request.

    Field limits are checked by the domain so every problem is reported at
    once; the bounds here only reject absurd payloads.
    """

    user_id: str  # From authenticated user
    title: str = Field(max_length=1000)
    starts_at: datetime
    max_participants: int | None = None
    visibility: VisibilityChoice = VisibilityChoice.ALL_FRIENDS
    activity_type: ActivityType = ActivityType.OTHER
    description: str | None = Field(default=None, max_length=5000)
    location: Location | None = None
    distance: str | None = Field(default=None, max_length=50)
    duration: str | None = Field(default=None, max_length=50)

    # Friends to invite; required for specific-friends visibility
    invitee_ids: list[str] = Field(default_factory=list, max_length=100)


class CreateActivityResponse(BaseModel):
    """Create activity response."""

    activity: ActivityItem
    invited_user_ids: list[str]
    failed_invitations: dict[str, str]


class CreateActivityUseCase:
    """Use case for creating an activity.

    For a specific-friends activity, invitations go out right after the
    activity is stored, in the same transaction.
    """

    def __init__(
        self,
        activity_service: ActivityService,
        invitation_service: InvitationService,
        profile_service: ProfileService,
    ) -> None:
        """Initialize create activity use case.

        Args:
            activity_service: Activity domain service
            invitation_service: Invitation domain service
            profile_service: Profile service for enrichment
        """
        self.activity_service = activity_service
        self.invitation_service = invitation_service
        self.profile_service = profile_service

    async def execute(self, request: CreateActivityRequest) -> CreateActivityResponse:
        """Execute create activity flow.

        Steps:
        1. Validate and store the activity
        2. Invite the selected friends (specific-friends only)
        3. Return the enriched activity with invitation outcomes

        Args:
            request: Activity fields and optional invitees

        Returns:
            Created activity and per-invitee results

        Raises:
            ValidationError: If any field is invalid, or specific-friends has
                no invitees
        """
        creator_id = UserId(request.user_id)
        specific = request.visibility == VisibilityChoice.SPECIFIC_FRIENDS
        if specific and not request.invitee_ids:
            raise ValidationError("Select at least one friend to invite")

        max_participants = request.max_participants
        if max_participants is None:
            max_participants = self.activity_service.settings.default_max_participants

        activity = await self.activity_service.create_activity(
            creator_id=creator_id,
            title=request.title,
            starts_at=request.starts_at,
            max_participants=max_participants,
            visibility=request.visibility,
            activity_type=request.activity_type,
            description=request.description,
            location=request.location,
            distance=request.distance,
            duration=request.duration,
        )

        invited: list[str] = []
        failed: dict[str, str] = {}
        if specific:
            created, failures = await self.invitation_service.send_invitations(
                activity.id, creator_id, [UserId(uid) for uid in request.invitee_ids]
            )
            invited = [inv.invited_user_id for inv in created]
            failed = dict(failures)

        items = await build_activity_items(
            [activity], creator_id, self.activity_service, self.profile_service
        )
        return CreateActivityResponse(
            activity=items[0], invited_user_ids=invited, failed_invitations=failed
        )
