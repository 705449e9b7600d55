"""Friendship domain service.

Implements the friendship edge state machine on top of the repository.
Every operation takes the acting user explicitly.
"""

import logfire

from rally.domain.error import (
    DuplicateError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
)
from rally.domain.model.friendship import FriendGraph, Friendship, canonical_pair
from rally.domain.repository import FriendshipRepository, ProfileRepository
from rally.domain.value import FriendshipStatus, UserId
from rally.util.time import utcnow

from .base import Service
from .notification_service import NotificationService

FALLBACK_NAME = "Someone"


def _pair_key(user_a: UserId, user_b: UserId) -> str:
    return f"{user_a}:{user_b}"


class FriendshipService(Service):
    """Domain service for friendship operations."""

    def __init__(
        self,
        friendship_repository: FriendshipRepository,
        profile_repository: ProfileRepository,
        notification_service: NotificationService,
    ) -> None:
        """Initialize friendship service.

        Args:
            friendship_repository: Friendship edge repository
            profile_repository: Profile repository (for names in notifications)
            notification_service: Notification service for best-effort alerts
        """
        self.friendship_repository = friendship_repository
        self.profile_repository = profile_repository
        self.notification_service = notification_service

    async def _display_name(self, user_id: UserId) -> str:
        profile = await self.profile_repository.find_by_id(user_id)
        return profile.display_name if profile else FALLBACK_NAME

    async def list_edges(self, me: UserId) -> list[Friendship]:
        """List every edge touching ``me``."""
        return await self.friendship_repository.find_for_user(me)

    async def get_graph(self, me: UserId) -> FriendGraph:
        """Load the edges touching ``me`` as a FriendGraph."""
        return FriendGraph(me, await self.list_edges(me))

    async def friend_ids(self, me: UserId) -> set[UserId]:
        """IDs of ``me``'s accepted friends."""
        return (await self.get_graph(me)).friend_ids

    async def are_friends(self, a: UserId, b: UserId) -> bool:
        """Whether ``a`` and ``b`` have an accepted edge."""
        edge = await self.friendship_repository.find_pair(*canonical_pair(a, b))
        return edge is not None and edge.status == FriendshipStatus.ACCEPTED

    async def send_request(self, me: UserId, other: UserId) -> Friendship:
        """Send a friend request from ``me`` to ``other``.

        If an edge already exists for the pair this is a no-op and the
        existing edge is returned unchanged.

        Args:
            me: Requesting user
            other: Addressee

        Returns:
            The new pending edge, or the existing edge

        Raises:
            ValidationError: If ``me`` and ``other`` are the same user
            NotFoundError: If ``other`` has no profile
        """
        with logfire.span("friendship_service.send_request", me=me, other=other):
            user_a, user_b = canonical_pair(me, other)

            if await self.profile_repository.find_by_id(other) is None:
                raise NotFoundError("Profile", other)

            try:
                edge = await self.friendship_repository.insert(
                    Friendship.request(me, other)
                )
            except DuplicateError:
                existing = await self.friendship_repository.find_pair(user_a, user_b)
                logfire.info(
                    "Friend request already exists",
                    me=me,
                    other=other,
                    status=existing.status.value if existing else None,
                )
                if existing is None:
                    # Removed between our insert and read; nothing to return
                    raise NotFoundError("Friendship", _pair_key(user_a, user_b))
                return existing

            sender_name = await self._display_name(me)
            self.notification_service.notify_friend_request(other, me, sender_name)

            logfire.info("Friend request sent", me=me, other=other)
            return edge

    async def accept_request(self, me: UserId, other: UserId) -> Friendship:
        """Accept the pending request ``other`` sent to ``me``.

        Args:
            me: Accepting user (must not be the requester)
            other: Original requester

        Returns:
            The accepted edge

        Raises:
            NotFoundError: If there is no edge for the pair
            NotAuthorizedError: If ``me`` sent the request
            InvalidTransitionError: If the edge is not pending
        """
        with logfire.span("friendship_service.accept_request", me=me, other=other):
            user_a, user_b = canonical_pair(me, other)
            key = _pair_key(user_a, user_b)

            edge = await self.friendship_repository.find_pair(user_a, user_b)
            if edge is None:
                logfire.warn("Accept on missing friendship", me=me, other=other)
                raise NotFoundError("Friendship", key)
            if edge.status != FriendshipStatus.PENDING:
                raise InvalidTransitionError(
                    "friendship", key, edge.status.value, FriendshipStatus.ACCEPTED.value
                )
            if edge.requested_by == me:
                logfire.warn("Requester tried to accept own request", me=me, other=other)
                raise NotAuthorizedError("friendship", key, me)

            accepted = await self.friendship_repository.update_status(
                user_a,
                user_b,
                FriendshipStatus.PENDING,
                FriendshipStatus.ACCEPTED,
                utcnow(),
            )
            if accepted is None:
                # Declined or blocked concurrently
                raise InvalidTransitionError(
                    "friendship", key, "changed", FriendshipStatus.ACCEPTED.value
                )

            acceptor_name = await self._display_name(me)
            self.notification_service.notify_friend_request_accepted(
                edge.requested_by, me, acceptor_name
            )

            logfire.info("Friend request accepted", me=me, other=other)
            return accepted

    async def decline_request(self, me: UserId, other: UserId) -> bool:
        """Decline (or withdraw) a pending request between ``me`` and ``other``.

        Only pending edges are deleted; accepted and blocked edges are left
        untouched.

        Returns:
            True if a pending request was removed, False otherwise
        """
        with logfire.span("friendship_service.decline_request", me=me, other=other):
            user_a, user_b = canonical_pair(me, other)
            deleted = await self.friendship_repository.delete_pair(
                user_a, user_b, status=FriendshipStatus.PENDING
            )
            logfire.info(
                "Friend request declined" if deleted else "No pending request to decline",
                me=me,
                other=other,
            )
            return deleted

    async def block_user(self, me: UserId, other: UserId) -> Friendship:
        """Block ``other``, replacing any existing edge.

        The delete and the insert run in the caller's transaction, so the
        pair is never observed without an edge by other requests.

        Returns:
            The blocked edge
        """
        with logfire.span("friendship_service.block_user", me=me, other=other):
            user_a, user_b = canonical_pair(me, other)
            blocked = Friendship.block(me, other)

            await self.friendship_repository.delete_pair(user_a, user_b)
            try:
                edge = await self.friendship_repository.insert(blocked)
            except DuplicateError:
                # A concurrent request recreated the edge; block wins
                await self.friendship_repository.delete_pair(user_a, user_b)
                edge = await self.friendship_repository.insert(blocked)

            logfire.info("User blocked", me=me, other=other)
            return edge

    async def unblock_user(self, me: UserId, other: UserId) -> bool:
        """Lift a block ``me`` placed on ``other``.

        Returns:
            True if a block was removed, False if there was none

        Raises:
            NotAuthorizedError: If the block was placed by ``other``
        """
        with logfire.span("friendship_service.unblock_user", me=me, other=other):
            user_a, user_b = canonical_pair(me, other)
            edge = await self.friendship_repository.find_pair(user_a, user_b)
            if edge is None or edge.status != FriendshipStatus.BLOCKED:
                return False
            if edge.requested_by != me:
                raise NotAuthorizedError("friendship", _pair_key(user_a, user_b), me)

            deleted = await self.friendship_repository.delete_pair(
                user_a, user_b, status=FriendshipStatus.BLOCKED, requested_by=me
            )
            logfire.info("User unblocked", me=me, other=other, deleted=deleted)
            return deleted

    async def remove_friend(self, me: UserId, other: UserId) -> bool:
        """Remove an accepted friendship.

        Returns:
            True if a friendship was removed, False if there was none
        """
        with logfire.span("friendship_service.remove_friend", me=me, other=other):
            user_a, user_b = canonical_pair(me, other)
            deleted = await self.friendship_repository.delete_pair(
                user_a, user_b, status=FriendshipStatus.ACCEPTED
            )
            logfire.info("Friend removed", me=me, other=other, deleted=deleted)
            return deleted
