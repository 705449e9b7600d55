"""Discover people use case."""

from pydantic import BaseModel, Field, model_validator

from rally.application.usecase.common import PersonItem, build_person
from rally.domain.service import FriendshipService, ProfileService
from rally.domain.value import UserId
from rally.util.time import utcnow


class DiscoveredPerson(BaseModel):
    """A user the viewer may want to befriend."""

    user: PersonItem
    request_sent: bool
    distance_km: float | None = None


class DiscoverPeopleRequest(BaseModel):
    """Discover people request.

    Either a name ``query`` or ``nearby=True`` (around the user's own
    location) selects the candidates.
    """

    user_id: str  # From authenticated user
    query: str | None = Field(default=None, max_length=100)
    nearby: bool = False
    radius_km: float | None = Field(default=None, gt=0, le=500)

    @model_validator(mode="after")
    def validate_mode(self) -> "DiscoverPeopleRequest":
        if not self.nearby and self.query is None:
            raise ValueError("Provide a search query or ask for nearby people")
        return self


class DiscoverPeopleResponse(BaseModel):
    """Discover people response."""

    people: list[DiscoveredPerson]


class DiscoverPeopleUseCase:
    """Use case for finding people to befriend.

    Friends, blocked users, senders of pending requests and the viewer are
    hidden. Users the viewer already asked stay visible, flagged
    ``request_sent``.
    """

    def __init__(
        self,
        friendship_service: FriendshipService,
        profile_service: ProfileService,
    ) -> None:
        """Initialize discover people use case.

        Args:
            friendship_service: Friendship domain service
            profile_service: Profile domain service
        """
        self.friendship_service = friendship_service
        self.profile_service = profile_service

    async def execute(self, request: DiscoverPeopleRequest) -> DiscoverPeopleResponse:
        """Execute discover people flow.

        Args:
            request: Search mode and parameters

        Returns:
            Candidates; nearest first in nearby mode, by name otherwise
        """
        me = UserId(request.user_id)
        graph = await self.friendship_service.get_graph(me)
        excluded = graph.discovery_exclusions
        sent = graph.outgoing_ids

        if request.nearby:
            matches = await self.profile_service.nearby(
                me, excluded, radius_km=request.radius_km
            )
        else:
            profiles = await self.profile_service.search(request.query or "", excluded)
            matches = [(profile, None) for profile in profiles]

        now = utcnow()
        people = []
        for profile, distance in matches:
            people.append(
                DiscoveredPerson(
                    user=await build_person(self.profile_service, profile, now),
                    request_sent=profile.id in sent,
                    distance_km=round(distance, 1) if distance is not None else None,
                )
            )
        return DiscoverPeopleResponse(people=people)
