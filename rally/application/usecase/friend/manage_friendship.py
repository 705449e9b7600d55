"""Manage friendship use case."""

from enum import Enum

from pydantic import BaseModel

from rally.application.usecase.base import BaseUseCase
from rally.domain.service import FriendshipService
from rally.domain.value import RelationshipStatus, UserId


class FriendshipAction(str, Enum):
    """Actions a user can take on their relationship with another user."""

    REQUEST = "request"
    ACCEPT = "accept"
    DECLINE = "decline"
    REMOVE = "remove"
    BLOCK = "block"
    UNBLOCK = "unblock"


class ManageFriendshipRequest(BaseModel):
    """Manage friendship request."""

    user_id: str  # From authenticated user
    other_user_id: str
    action: FriendshipAction


class ManageFriendshipResponse(BaseModel):
    """Manage friendship response."""

    other_user_id: str
    action: FriendshipAction
    changed: bool
    status: RelationshipStatus


class ManageFriendshipUseCase(BaseUseCase):
    """Use case for every friendship state change.

    ``changed`` is False for the tolerated no-ops: repeating a request,
    declining something that is no longer pending, removing a non-friend or
    unblocking a pair that is not blocked.
    """

    def __init__(self, friendship_service: FriendshipService) -> None:
        """Initialize manage friendship use case.

        Args:
            friendship_service: Friendship domain service
        """
        self.friendship_service = friendship_service

    async def execute(self, request: ManageFriendshipRequest) -> ManageFriendshipResponse:
        """Execute the requested action.

        Args:
            request: Acting user, counterpart and action

        Returns:
            Whether anything changed and the resulting relationship

        Raises:
            ValidationError: If both users are the same
            NotFoundError: If the counterpart or the pending request is missing
            NotAuthorizedError: If the user may not perform the action
            InvalidTransitionError: If the edge is in the wrong state
        """
        me = UserId(request.user_id)
        other = UserId(request.other_user_id)
        before = await self.friendship_service.get_graph(me)

        action = request.action
        if action == FriendshipAction.REQUEST:
            await self.friendship_service.send_request(me, other)
            changed = before.edge_with(other) is None
        elif action == FriendshipAction.ACCEPT:
            await self.friendship_service.accept_request(me, other)
            changed = True
        elif action == FriendshipAction.DECLINE:
            changed = await self.friendship_service.decline_request(me, other)
        elif action == FriendshipAction.REMOVE:
            changed = await self.friendship_service.remove_friend(me, other)
        elif action == FriendshipAction.BLOCK:
            await self.friendship_service.block_user(me, other)
            changed = before.status_with(other) != RelationshipStatus.BLOCKED
        else:
            changed = await self.friendship_service.unblock_user(me, other)

        after = await self.friendship_service.get_graph(me)
        return ManageFriendshipResponse(
            other_user_id=other,
            action=request.action,
            changed=changed,
            status=after.status_with(other),
        )
