"""List invitations use cases."""

from datetime import datetime

from pydantic import BaseModel

from rally.application.usecase.common import (
    ActivityItem,
    PersonItem,
    build_activity_items,
    build_person,
)
from rally.domain.service import ActivityService, InvitationService, ProfileService
from rally.domain.value import ActivityId, UserId
from rally.util.time import utcnow


class ReceivedInvitationItem(BaseModel):
    """A pending invitation with the activity it is for."""

    invitation_id: str
    activity: ActivityItem
    invited_by: PersonItem | None
    created_at: datetime


class SentInvitationItem(BaseModel):
    """An invitation the organizer sent, with its current answer."""

    invitation_id: str
    invitee: PersonItem | None
    status: str
    created_at: datetime
    responded_at: datetime | None


class ListReceivedInvitationsRequest(BaseModel):
    """List received invitations request."""

    user_id: str  # From authenticated user


class ListReceivedInvitationsResponse(BaseModel):
    """List received invitations response."""

    invitations: list[ReceivedInvitationItem]


class ListSentInvitationsRequest(BaseModel):
    """List sent invitations request."""

    user_id: str  # From authenticated user
    activity_id: ActivityId


class ListSentInvitationsResponse(BaseModel):
    """List sent invitations response."""

    invitations: list[SentInvitationItem]


class ListReceivedInvitationsUseCase:
    """Use case for the invitations waiting on a user.

    Invitations to cancelled or already started activities are hidden.
    """

    def __init__(
        self,
        invitation_service: InvitationService,
        activity_service: ActivityService,
        profile_service: ProfileService,
    ) -> None:
        """Initialize list received invitations use case.

        Args:
            invitation_service: Invitation domain service
            activity_service: Activity service for the invited activities
            profile_service: Profile service for enrichment
        """
        self.invitation_service = invitation_service
        self.activity_service = activity_service
        self.profile_service = profile_service

    async def execute(
        self, request: ListReceivedInvitationsRequest
    ) -> ListReceivedInvitationsResponse:
        """Execute list received invitations flow.

        Returns:
            Pending invitations, newest first
        """
        user_id = UserId(request.user_id)
        now = utcnow()
        invitations = await self.invitation_service.received(user_id)
        activities = await self.activity_service.get_activities(
            {inv.activity_id for inv in invitations}
        )

        open_invitations = [
            inv
            for inv in invitations
            if inv.activity_id in activities
            and not activities[inv.activity_id].is_cancelled
            and activities[inv.activity_id].is_upcoming(now)
        ]

        # One enrichment pass for all distinct activities
        unique = {inv.activity_id: activities[inv.activity_id] for inv in open_invitations}
        items = await build_activity_items(
            list(unique.values()), user_id, self.activity_service, self.profile_service
        )
        by_id = {item.activity_id: item for item in items}

        inviters = await self.profile_service.get_profiles(
            {inv.invited_by for inv in open_invitations}
        )
        results = []
        for inv in open_invitations:
            inviter = inviters.get(inv.invited_by)
            results.append(
                ReceivedInvitationItem(
                    invitation_id=str(inv.id),
                    activity=by_id[str(inv.activity_id)],
                    invited_by=(
                        await build_person(self.profile_service, inviter, now)
                        if inviter
                        else None
                    ),
                    created_at=inv.created_at,
                )
            )
        return ListReceivedInvitationsResponse(invitations=results)


class ListSentInvitationsUseCase:
    """Use case for an organizer reviewing invitations for an activity."""

    def __init__(
        self, invitation_service: InvitationService, profile_service: ProfileService
    ) -> None:
        self.invitation_service = invitation_service
        self.profile_service = profile_service

    async def execute(
        self, request: ListSentInvitationsRequest
    ) -> ListSentInvitationsResponse:
        """Execute list sent invitations flow.

        Raises:
            NotFoundError: If the activity does not exist
            NotAuthorizedError: If the user is not the organizer
        """
        now = utcnow()
        invitations = await self.invitation_service.sent_for_activity(
            request.activity_id, UserId(request.user_id)
        )
        invitees = await self.profile_service.get_profiles(
            {inv.invited_user_id for inv in invitations}
        )

        results = []
        for inv in invitations:
            invitee = invitees.get(inv.invited_user_id)
            results.append(
                SentInvitationItem(
                    invitation_id=str(inv.id),
                    invitee=(
                        await build_person(self.profile_service, invitee, now)
                        if invitee
                        else None
                    ),
                    status=inv.status.value,
                    created_at=inv.created_at,
                    responded_at=inv.responded_at,
                )
            )
        return ListSentInvitationsResponse(invitations=results)
