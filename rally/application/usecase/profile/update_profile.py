"""Update profile use case."""

from pydantic import BaseModel, Field

from rally.application.usecase.common import PersonItem, build_person
from rally.domain.error import ValidationError
from rally.domain.service import ProfileService
from rally.domain.value import Location, UserId


class UpdateProfileRequest(BaseModel):
    """Update profile request."""

    user_id: str  # From authenticated user
    display_name: str | None = Field(default=None, max_length=200)
    location: Location | None = None
    clear_location: bool = False


class UpdateProfileResponse(BaseModel):
    """Update profile response."""

    profile: PersonItem


class UpdateProfileUseCase:
    """Use case for editing the user's own display name and location."""

    def __init__(self, profile_service: ProfileService) -> None:
        """Initialize update profile use case.

        Args:
            profile_service: Profile domain service
        """
        self.profile_service = profile_service

    async def execute(self, request: UpdateProfileRequest) -> UpdateProfileResponse:
        """Execute update profile flow.

        Raises:
            ValidationError: If nothing was sent or the name is invalid
            NotFoundError: If the user has no profile yet
        """
        if (
            request.display_name is None
            and request.location is None
            and not request.clear_location
        ):
            raise ValidationError("No changes provided")

        updated = await self.profile_service.update_profile(
            UserId(request.user_id),
            display_name=request.display_name,
            location=request.location,
            clear_location=request.clear_location,
        )
        return UpdateProfileResponse(
            profile=await build_person(self.profile_service, updated)
        )
