"""Session routes.

Sign-in, sign-up, OAuth and password reset are handled by the auth
provider; the API only verifies the provider's access token.
"""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

from rally.application.usecase.auth import GetSessionUseCase
from rally.application.usecase.auth.get_session import (
    GetSessionRequest,
    GetSessionResponse,
)
from rally.config import Settings
from rally.domain.service import JWTService
from rally.interface.api.security import authenticate

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool
    message: str


@router.get("/session", response_model=GetSessionResponse)
async def get_session(
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    get_session_use_case: FromDishka[GetSessionUseCase],
) -> GetSessionResponse:
    """Resolve the signed-in user.

    Creates the profile on first sight and records the user as active.

    Example:
        GET /auth/session
        Authorization: Bearer <access token>

        Response:
        {
            "user_id": "8d0f...",
            "email": "alice@example.com",
            "profile": {"display_name": "Alice", "initials": "A", ...}
        }
    """
    token = authenticate(http_request, jwt_service)
    return await get_session_use_case.execute(
        GetSessionRequest(
            user_id=token.user_id,
            email=token.email,
            user_metadata=token.user_metadata,
        )
    )


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response, settings: FromDishka[Settings]) -> LogoutResponse:
    """Clear the auth cookie.

    The provider session itself is revoked by the frontend.
    """
    response.delete_cookie(key=settings.auth.cookie_name, path="/")
    return LogoutResponse(success=True, message="Successfully logged out")
