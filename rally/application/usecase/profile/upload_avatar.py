"""Upload avatar use case."""

from pydantic import BaseModel

from rally.application.usecase.common import PersonItem, build_person
from rally.domain.service import ProfileService
from rally.domain.value import UserId


class UploadAvatarRequest(BaseModel):
    """Upload avatar request."""

    user_id: str  # From authenticated user
    content: bytes
    content_type: str


class UploadAvatarResponse(BaseModel):
    """Upload avatar response."""

    profile: PersonItem


class UploadAvatarUseCase:
    """Use case for replacing the user's avatar image."""

    def __init__(self, profile_service: ProfileService) -> None:
        self.profile_service = profile_service

    async def execute(self, request: UploadAvatarRequest) -> UploadAvatarResponse:
        """Execute upload avatar flow.

        Raises:
            ValidationError: If the file is empty, too large or not an image
            ProviderError: If storage rejects the upload
        """
        updated = await self.profile_service.upload_avatar(
            UserId(request.user_id), request.content, request.content_type
        )
        return UploadAvatarResponse(
            profile=await build_person(self.profile_service, updated)
        )
