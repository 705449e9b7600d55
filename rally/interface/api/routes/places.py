"""Place search routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, Request

from rally.application.usecase.place import SearchPlacesUseCase
from rally.application.usecase.place.search_places import (
    SearchPlacesRequest,
    SearchPlacesResponse,
)
from rally.domain.service import JWTService
from rally.interface.api.security import authenticate

router = APIRouter(prefix="/places", tags=["places"], route_class=DishkaRoute)


@router.get("/search", response_model=SearchPlacesResponse)
async def search_places(
    http_request: Request,
    jwt_service: FromDishka[JWTService],
    search_places_use_case: FromDishka[SearchPlacesUseCase],
    q: str = Query(max_length=200),
) -> SearchPlacesResponse:
    """Location autocomplete.

    Clients should drop responses with ``stale: true``; a newer search from
    the same user has replaced them.

    Example:
        GET /places/search?q=vondelpark
    """
    token = authenticate(http_request, jwt_service)
    return await search_places_use_case.execute(
        SearchPlacesRequest(user_id=token.user_id, query=q)
    )
