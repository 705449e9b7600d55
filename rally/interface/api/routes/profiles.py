"""Profile routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, File, Request, UploadFile
from pydantic import BaseModel, Field

from rally.application.usecase.profile import (
    GetProfileUseCase,
    UpdateProfileUseCase,
    UploadAvatarUseCase,
)
from rally.application.usecase.profile.get_profile import (
    GetProfileRequest,
    GetProfileResponse,
)
from rally.application.usecase.profile.update_profile import (
    UpdateProfileRequest,
    UpdateProfileResponse,
)
from rally.application.usecase.profile.upload_avatar import (
    UploadAvatarRequest,
    UploadAvatarResponse,
)
from rally.domain.service import JWTService
from rally.domain.value import Location
from rally.interface.api.security import authenticate

router = APIRouter(prefix="/profiles", tags=["profiles"], route_class=DishkaRoute)


class UpdateProfileAPIRequest(BaseModel):
    """API request for updating the own profile."""

    display_name: str | None = Field(default=None, max_length=200)
    location: Location | None = None
    clear_location: bool = False


@router.get("/me", response_model=GetProfileResponse)
async def get_my_profile(
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    get_profile_use_case: FromDishka[GetProfileUseCase],
) -> GetProfileResponse:
    """Get the signed-in user's profile."""
    token = authenticate(http_request, jwt_service)
    return await get_profile_use_case.execute(GetProfileRequest(user_id=token.user_id))


@router.patch("/me", response_model=UpdateProfileResponse)
async def update_my_profile(
    request: UpdateProfileAPIRequest,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    update_profile_use_case: FromDishka[UpdateProfileUseCase],
) -> UpdateProfileResponse:
    """Update display name and/or location.

    Example:
        PATCH /profiles/me
        {
            "display_name": "Alice",
            "location": {"place_name": "Vondelpark", "lat": 52.358, "lng": 4.868}
        }
    """
    token = authenticate(http_request, jwt_service)
    return await update_profile_use_case.execute(
        UpdateProfileRequest(
            user_id=token.user_id,
            display_name=request.display_name,
            location=request.location,
            clear_location=request.clear_location,
        )
    )


@router.post("/me/avatar", response_model=UploadAvatarResponse)
async def upload_my_avatar(
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    upload_avatar_use_case: FromDishka[UploadAvatarUseCase],
    file: UploadFile = File(...),
) -> UploadAvatarResponse:
    """Replace the avatar with an uploaded image (multipart form)."""
    token = authenticate(http_request, jwt_service)
    content = await file.read()
    return await upload_avatar_use_case.execute(
        UploadAvatarRequest(
            user_id=token.user_id,
            content=content,
            content_type=file.content_type or "application/octet-stream",
        )
    )


@router.get("/{user_id}", response_model=GetProfileResponse)
async def get_profile(
    user_id: str,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    get_profile_use_case: FromDishka[GetProfileUseCase],
) -> GetProfileResponse:
    """Get another user's profile and the viewer's relationship to them."""
    token = authenticate(http_request, jwt_service)
    return await get_profile_use_case.execute(
        GetProfileRequest(user_id=token.user_id, target_user_id=user_id)
    )
