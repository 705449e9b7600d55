"""Get friends use case."""

from datetime import datetime

from pydantic import BaseModel

from rally.application.usecase.common import PersonItem, build_person
from rally.domain.service import FriendshipService, ProfileService
from rally.domain.value import UserId
from rally.util.time import utcnow


class FriendRequestItem(BaseModel):
    """A pending request with the other user's card."""

    user: PersonItem
    requested_at: datetime


class GetFriendsRequest(BaseModel):
    """Get friends request."""

    user_id: str  # From authenticated user


class GetFriendsResponse(BaseModel):
    """Get friends response."""

    friends: list[PersonItem]
    incoming_requests: list[FriendRequestItem]
    outgoing_requests: list[FriendRequestItem]
    online_count: int


class GetFriendsUseCase:
    """Use case for the friends overview.

    Friends are listed online first, then alphabetically. Users who vanished
    from the profile table are skipped.
    """

    def __init__(
        self,
        friendship_service: FriendshipService,
        profile_service: ProfileService,
    ) -> None:
        """Initialize get friends use case.

        Args:
            friendship_service: Friendship domain service
            profile_service: Profile domain service
        """
        self.friendship_service = friendship_service
        self.profile_service = profile_service

    async def execute(self, request: GetFriendsRequest) -> GetFriendsResponse:
        """Execute get friends flow.

        Args:
            request: Request with the authenticated user

        Returns:
            Friends and pending requests in both directions
        """
        me = UserId(request.user_id)
        graph = await self.friendship_service.get_graph(me)

        incoming = graph.incoming
        outgoing = graph.outgoing
        wanted = set(graph.friend_ids)
        wanted.update(edge.other(me) for edge in incoming + outgoing)
        profiles = await self.profile_service.get_profiles(wanted)

        now = utcnow()
        people: dict[UserId, PersonItem] = {}
        for user_id, profile in profiles.items():
            people[user_id] = await build_person(self.profile_service, profile, now)

        friends = [people[uid] for uid in graph.friend_ids if uid in people]
        friends.sort(key=lambda p: (not p.is_online, p.display_name.lower()))

        def requests(edges) -> list[FriendRequestItem]:
            return [
                FriendRequestItem(user=people[edge.other(me)], requested_at=edge.created_at)
                for edge in edges
                if edge.other(me) in people
            ]

        return GetFriendsResponse(
            friends=friends,
            incoming_requests=requests(incoming),
            outgoing_requests=requests(outgoing),
            online_count=sum(1 for friend in friends if friend.is_online),
        )
