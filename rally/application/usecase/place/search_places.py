"""Search places use case."""

from pydantic import BaseModel, Field

from rally.domain.service import PlaceService
from rally.domain.value import UserId
from rally.domain.value.types import PlaceCandidate


class SearchPlacesRequest(BaseModel):
    """Search places request."""

    user_id: str  # From authenticated user
    query: str = Field(max_length=200)


class SearchPlacesResponse(BaseModel):
    """Search places response.

    ``stale`` is set when a newer search from the same user overtook this
    one; clients should ignore such responses.
    """

    query: str
    results: list[PlaceCandidate]
    stale: bool


class SearchPlacesUseCase:
    """Use case for location autocomplete."""

    def __init__(self, place_service: PlaceService) -> None:
        """Initialize search places use case.

        Args:
            place_service: Place domain service
        """
        self.place_service = place_service

    async def execute(self, request: SearchPlacesRequest) -> SearchPlacesResponse:
        """Execute place search.

        Raises:
            ProviderError: If the geocoding provider fails
        """
        result = await self.place_service.search(UserId(request.user_id), request.query)
        return SearchPlacesResponse(
            query=result.query, results=result.results, stale=result.stale
        )
