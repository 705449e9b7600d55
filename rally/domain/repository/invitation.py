"""Activity invitation repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from rally.domain.model.invitation import ActivityInvitation
from rally.domain.value import ActivityId, InvitationId, InvitationStatus, UserId


class InvitationRepository(ABC):
    """Repository for ActivityInvitation entity.

    Writes that depend on ownership or state carry those conditions in the
    write itself, so they match zero rows rather than acting on a record the
    caller may not touch.
    """

    @abstractmethod
    async def find_by_id(self, invitation_id: InvitationId) -> ActivityInvitation | None:
        """Find an invitation by ID.

        Args:
            invitation_id: The invitation's unique identifier

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(self, invitation: ActivityInvitation) -> ActivityInvitation:
        """Insert a new invitation.

        Args:
            invitation: The invitation to insert

        Returns:
            The inserted invitation

        Raises:
            DuplicateError: If the user was already invited to the activity
        """
        pass

    @abstractmethod
    async def respond(
        self,
        invitation_id: InvitationId,
        invited_user_id: UserId,
        status: InvitationStatus,
        responded_at: datetime,
    ) -> ActivityInvitation | None:
        """Answer a pending invitation on behalf of its addressee.

        Matches only when the invitation is pending and addressed to
        ``invited_user_id``.

        Args:
            invitation_id: The invitation
            invited_user_id: The responding user
            status: ACCEPTED or DECLINED
            responded_at: Response timestamp

        Returns:
            The updated invitation, or None if nothing matched
        """
        pass

    @abstractmethod
    async def delete_pending(
        self, invitation_id: InvitationId, invited_by: UserId
    ) -> bool:
        """Delete a pending invitation sent by ``invited_by``.

        Args:
            invitation_id: The invitation
            invited_by: The inviter

        Returns:
            True if a row was deleted, False otherwise
        """
        pass

    @abstractmethod
    async def find_pending_for_user(self, user_id: UserId) -> list[ActivityInvitation]:
        """Find pending invitations addressed to a user, newest first.

        Args:
            user_id: The invited user

        Returns:
            Pending invitations
        """
        pass

    @abstractmethod
    async def find_by_activity(self, activity_id: ActivityId) -> list[ActivityInvitation]:
        """Find every invitation sent for an activity, newest first.

        Args:
            activity_id: The activity

        Returns:
            Invitations in any status
        """
        pass

    @abstractmethod
    async def find_open_activity_ids_for_user(self, user_id: UserId) -> set[ActivityId]:
        """Find activities a user holds a pending or accepted invitation to.

        Grants visibility of private activities in the feed.

        Args:
            user_id: The invited user

        Returns:
            Activity IDs
        """
        pass
