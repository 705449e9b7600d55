"""Get session use case."""

from typing import Any

from pydantic import BaseModel, Field

from rally.application.usecase.base import BaseUseCase
from rally.application.usecase.common import PersonItem, build_person
from rally.domain.service import ProfileService
from rally.domain.value import UserId


class GetSessionRequest(BaseModel):
    """Get session request, built from a verified access token."""

    user_id: str
    email: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class GetSessionResponse(BaseModel):
    """Get session response."""

    user_id: str
    email: str | None
    profile: PersonItem


class GetSessionUseCase(BaseUseCase):
    """Use case for resolving the signed-in user.

    Every session fetch makes sure a profile exists for the user and records
    them as seen, which drives online indicators.
    """

    def __init__(self, profile_service: ProfileService) -> None:
        """Initialize get session use case.

        Args:
            profile_service: Profile domain service
        """
        self.profile_service = profile_service

    async def execute(self, request: GetSessionRequest) -> GetSessionResponse:
        """Execute get session flow.

        Args:
            request: Identity claims from the access token

        Returns:
            The user's enriched profile
        """
        profile = await self.profile_service.ensure_profile(
            UserId(request.user_id),
            email=request.email,
            user_metadata=request.user_metadata,
        )

        return GetSessionResponse(
            user_id=request.user_id,
            email=request.email,
            profile=await build_person(self.profile_service, profile),
        )
