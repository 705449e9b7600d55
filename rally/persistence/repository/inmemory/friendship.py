"""In-memory friendship repository for testing."""

from datetime import datetime

from rally.domain.error import DuplicateError
from rally.domain.model.friendship import Friendship
from rally.domain.repository.friendship import FriendshipRepository
from rally.domain.value import FriendshipStatus, UserId


class InMemoryFriendshipRepository(FriendshipRepository):
    """In-memory implementation of FriendshipRepository for testing.

    Keyed by the canonical pair, like the table's primary key.
    """

    def __init__(self) -> None:
        self._edges: dict[tuple[UserId, UserId], Friendship] = {}

    async def find_pair(self, user_a: UserId, user_b: UserId) -> Friendship | None:
        """Find the edge for a canonical pair."""
        return self._edges.get((user_a, user_b))

    async def find_for_user(self, user_id: UserId) -> list[Friendship]:
        """Find every edge touching a user, newest first."""
        edges = [edge for edge in self._edges.values() if edge.involves(user_id)]
        edges.sort(key=lambda edge: edge.created_at, reverse=True)
        return edges

    async def insert(self, friendship: Friendship) -> Friendship:
        """Insert a new edge.

        Raises:
            DuplicateError: If an edge already exists for the pair
        """
        if friendship.pair in self._edges:
            raise DuplicateError(
                "friendship", f"{friendship.user_a}:{friendship.user_b}"
            )
        self._edges[friendship.pair] = friendship
        return friendship

    async def update_status(
        self,
        user_a: UserId,
        user_b: UserId,
        from_status: FriendshipStatus,
        to_status: FriendshipStatus,
        updated_at: datetime,
    ) -> Friendship | None:
        """Move an edge between statuses if it is currently in ``from_status``."""
        edge = self._edges.get((user_a, user_b))
        if edge is None or edge.status != from_status:
            return None
        updated = edge.evolve(status=to_status, updated_at=updated_at)
        self._edges[(user_a, user_b)] = updated
        return updated

    async def delete_pair(
        self,
        user_a: UserId,
        user_b: UserId,
        status: FriendshipStatus | None = None,
        requested_by: UserId | None = None,
    ) -> bool:
        """Delete the edge for a pair, optionally only in a given state."""
        edge = self._edges.get((user_a, user_b))
        if edge is None:
            return False
        if status is not None and edge.status != status:
            return False
        if requested_by is not None and edge.requested_by != requested_by:
            return False
        del self._edges[(user_a, user_b)]
        return True
