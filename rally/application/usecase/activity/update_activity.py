"""Update activity use case."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from rally.application.usecase.common import ActivityItem, build_activity_items
from rally.domain.error import ValidationError
from rally.domain.service import ActivityService, ProfileService
from rally.domain.value import ActivityId, ActivityType, Location, UserId


class UpdateActivityRequest(BaseModel):
    """Update activity request.

    Only fields that were sent are changed; send ``location: null`` to clear
    the location.
    """

    user_id: str  # From authenticated user
    activity_id: ActivityId
    title: str | None = Field(default=None, max_length=1000)
    description: str | None = Field(default=None, max_length=5000)
    starts_at: datetime | None = None
    location: Location | None = None
    activity_type: ActivityType | None = None
    max_participants: int | None = None
    distance: str | None = Field(default=None, max_length=50)
    duration: str | None = Field(default=None, max_length=50)

    def changes(self) -> dict[str, Any]:
        """Fields explicitly set by the caller, excluding identifiers."""
        sent = self.model_dump(exclude_unset=True, exclude={"user_id", "activity_id"})
        return {name: getattr(self, name) for name in sent}


class UpdateActivityResponse(BaseModel):
    """Update activity response."""

    activity: ActivityItem


class UpdateActivityUseCase:
    """Use case for editing an activity as its organizer."""

    def __init__(
        self, activity_service: ActivityService, profile_service: ProfileService
    ) -> None:
        """Initialize update activity use case.

        Args:
            activity_service: Activity domain service
            profile_service: Profile service for enrichment
        """
        self.activity_service = activity_service
        self.profile_service = profile_service

    async def execute(self, request: UpdateActivityRequest) -> UpdateActivityResponse:
        """Execute update activity flow.

        Raises:
            ValidationError: If nothing was sent or a field is invalid
            NotFoundError: If the activity does not exist
            NotAuthorizedError: If the user is not the organizer
            InvalidTransitionError: If the activity is cancelled
        """
        changes = request.changes()
        if not changes:
            raise ValidationError("No changes provided")

        user_id = UserId(request.user_id)
        updated = await self.activity_service.update_activity(
            request.activity_id, user_id, changes
        )

        items = await build_activity_items(
            [updated], user_id, self.activity_service, self.profile_service
        )
        return UpdateActivityResponse(activity=items[0])
