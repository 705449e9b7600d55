"""Friendship routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, Request

from rally.application.usecase.friend import (
    DiscoverPeopleUseCase,
    FriendshipAction,
    GetFriendsUseCase,
    ManageFriendshipUseCase,
)
from rally.application.usecase.friend.discover_people import (
    DiscoverPeopleRequest,
    DiscoverPeopleResponse,
)
from rally.application.usecase.friend.get_friends import (
    GetFriendsRequest,
    GetFriendsResponse,
)
from rally.application.usecase.friend.manage_friendship import (
    ManageFriendshipRequest,
    ManageFriendshipResponse,
)
from rally.domain.service import JWTService
from rally.interface.api.security import authenticate

router = APIRouter(prefix="/friends", tags=["friends"], route_class=DishkaRoute)


@router.get("", response_model=GetFriendsResponse)
async def get_friends(
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    get_friends_use_case: FromDishka[GetFriendsUseCase],
) -> GetFriendsResponse:
    """List friends and pending requests in both directions."""
    token = authenticate(http_request, jwt_service)
    return await get_friends_use_case.execute(GetFriendsRequest(user_id=token.user_id))


@router.get("/discover", response_model=DiscoverPeopleResponse)
async def discover_people(
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    discover_people_use_case: FromDishka[DiscoverPeopleUseCase],
    query: str | None = Query(default=None, max_length=100),
    nearby: bool = False,
    radius_km: float | None = Query(default=None, gt=0, le=500),
) -> DiscoverPeopleResponse:
    """Find people to befriend by name or around the user's location.

    Example:
        GET /friends/discover?query=ali
        GET /friends/discover?nearby=true&radius_km=10
    """
    token = authenticate(http_request, jwt_service)
    return await discover_people_use_case.execute(
        DiscoverPeopleRequest(
            user_id=token.user_id, query=query, nearby=nearby, radius_km=radius_km
        )
    )


@router.post("/{other_user_id}/{action}", response_model=ManageFriendshipResponse)
async def manage_friendship(
    other_user_id: str,
    action: FriendshipAction,
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    manage_friendship_use_case: FromDishka[ManageFriendshipUseCase],
) -> ManageFriendshipResponse:
    """Change the relationship with another user.

    ``action`` is one of request, accept, decline, remove, block, unblock.

    Example:
        POST /friends/8d0f.../request

        Response:
        {"other_user_id": "8d0f...", "action": "request", "changed": true,
         "status": "pending_sent"}
    """
    token = authenticate(http_request, jwt_service)
    return await manage_friendship_use_case.execute(
        ManageFriendshipRequest(
            user_id=token.user_id, other_user_id=other_user_id, action=action
        )
    )
