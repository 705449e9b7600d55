"""In-memory invitation repository for testing."""

from datetime import datetime

from rally.domain.error import DuplicateError
from rally.domain.model.invitation import ActivityInvitation
from rally.domain.repository.invitation import InvitationRepository
from rally.domain.value import ActivityId, InvitationId, InvitationStatus, UserId


class InMemoryInvitationRepository(InvitationRepository):
    """In-memory implementation of InvitationRepository for testing."""

    def __init__(self) -> None:
        self._invitations: dict[InvitationId, ActivityInvitation] = {}

    async def find_by_id(self, invitation_id: InvitationId) -> ActivityInvitation | None:
        """Find an invitation by ID."""
        return self._invitations.get(invitation_id)

    async def insert(self, invitation: ActivityInvitation) -> ActivityInvitation:
        """Insert a new invitation.

        Raises:
            DuplicateError: If the user was already invited to the activity
        """
        for existing in self._invitations.values():
            if (
                existing.activity_id == invitation.activity_id
                and existing.invited_user_id == invitation.invited_user_id
            ):
                raise DuplicateError(
                    "invitation",
                    f"{invitation.activity_id}:{invitation.invited_user_id}",
                )
        self._invitations[invitation.id] = invitation
        return invitation

    async def respond(
        self,
        invitation_id: InvitationId,
        invited_user_id: UserId,
        status: InvitationStatus,
        responded_at: datetime,
    ) -> ActivityInvitation | None:
        """Answer a pending invitation on behalf of its addressee."""
        invitation = self._invitations.get(invitation_id)
        if (
            invitation is None
            or invitation.invited_user_id != invited_user_id
            or not invitation.is_pending
        ):
            return None
        updated = invitation.evolve(status=status, responded_at=responded_at)
        self._invitations[invitation_id] = updated
        return updated

    async def delete_pending(
        self, invitation_id: InvitationId, invited_by: UserId
    ) -> bool:
        """Delete a pending invitation sent by ``invited_by``."""
        invitation = self._invitations.get(invitation_id)
        if (
            invitation is None
            or invitation.invited_by != invited_by
            or not invitation.is_pending
        ):
            return False
        del self._invitations[invitation_id]
        return True

    async def find_pending_for_user(self, user_id: UserId) -> list[ActivityInvitation]:
        """Find pending invitations addressed to a user, newest first."""
        matches = [
            inv
            for inv in self._invitations.values()
            if inv.invited_user_id == user_id and inv.is_pending
        ]
        matches.sort(key=lambda inv: inv.created_at, reverse=True)
        return matches

    async def find_by_activity(self, activity_id: ActivityId) -> list[ActivityInvitation]:
        """Find every invitation sent for an activity, newest first."""
        matches = [
            inv for inv in self._invitations.values() if inv.activity_id == activity_id
        ]
        matches.sort(key=lambda inv: inv.created_at, reverse=True)
        return matches

    async def find_open_activity_ids_for_user(self, user_id: UserId) -> set[ActivityId]:
        """Find activities a user holds a pending or accepted invitation to."""
        return {
            inv.activity_id
            for inv in self._invitations.values()
            if inv.invited_user_id == user_id
            and inv.status in (InvitationStatus.PENDING, InvitationStatus.ACCEPTED)
        }
