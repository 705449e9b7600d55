"""Friendship repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from rally.domain.model.friendship import Friendship
from rally.domain.value import FriendshipStatus, UserId


class FriendshipRepository(ABC):
    """Repository for friendship edges.

    Every method takes the pair in canonical order (``user_a < user_b``);
    callers canonicalize with ``canonical_pair`` first.
    """

    @abstractmethod
    async def find_pair(self, user_a: UserId, user_b: UserId) -> Friendship | None:
        """Find the edge for a canonical pair.

        Args:
            user_a: Smaller user ID
            user_b: Larger user ID

        Returns:
            The edge if one exists, None otherwise
        """
        pass

    @abstractmethod
    async def find_for_user(self, user_id: UserId) -> list[Friendship]:
        """Find every edge touching a user, in any status.

        Args:
            user_id: The user

        Returns:
            Edges where the user is either side
        """
        pass

    @abstractmethod
    async def insert(self, friendship: Friendship) -> Friendship:
        """Insert a new edge.

        Args:
            friendship: The edge to insert

        Returns:
            The inserted edge

        Raises:
            DuplicateError: If an edge already exists for the pair
        """
        pass

    @abstractmethod
    async def update_status(
        self,
        user_a: UserId,
        user_b: UserId,
        from_status: FriendshipStatus,
        to_status: FriendshipStatus,
        updated_at: datetime,
    ) -> Friendship | None:
        """Move an edge between statuses if it is currently in ``from_status``.

        The status check is part of the write, so a concurrent change makes
        this match zero rows instead of overwriting it.

        Args:
            user_a: Smaller user ID
            user_b: Larger user ID
            from_status: Required current status
            to_status: New status
            updated_at: Modification timestamp

        Returns:
            The updated edge, or None if no edge matched
        """
        pass

    @abstractmethod
    async def delete_pair(
        self,
        user_a: UserId,
        user_b: UserId,
        status: FriendshipStatus | None = None,
        requested_by: UserId | None = None,
    ) -> bool:
        """Delete the edge for a pair, optionally only in a given state.

        Args:
            user_a: Smaller user ID
            user_b: Larger user ID
            status: Only delete when the edge has this status
            requested_by: Only delete when the edge was requested by this user

        Returns:
            True if a row was deleted, False otherwise
        """
        pass
