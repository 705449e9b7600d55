"""Activity invitation domain service."""

from collections.abc import Iterable
from uuid import uuid4

import logfire

from rally.domain.error import (
    DuplicateError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
)
from rally.domain.model.invitation import ActivityInvitation
from rally.domain.repository import InvitationRepository, ProfileRepository
from rally.domain.value import ActivityId, InvitationId, InvitationStatus, UserId
from rally.util.time import utcnow

from .activity_service import ActivityService
from .base import Service
from .friendship_service import FALLBACK_NAME, FriendshipService
from .notification_service import NotificationService


class InvitationService(Service):
    """Domain service for activity invitations.

    State machine:
        pending --accept (addressee)--> accepted (also joins the activity)
        pending --decline (addressee)--> declined
        pending --cancel (inviter)--> deleted
    """

    def __init__(
        self,
        invitation_repository: InvitationRepository,
        profile_repository: ProfileRepository,
        activity_service: ActivityService,
        friendship_service: FriendshipService,
        notification_service: NotificationService,
    ) -> None:
        """Initialize invitation service.

        Args:
            invitation_repository: Invitation repository
            profile_repository: Profile repository (for the inviter's name)
            activity_service: Activity domain service
            friendship_service: Friendship domain service
            notification_service: Notification service for best-effort alerts
        """
        self.invitation_repository = invitation_repository
        self.profile_repository = profile_repository
        self.activity_service = activity_service
        self.friendship_service = friendship_service
        self.notification_service = notification_service

    async def _get(self, invitation_id: InvitationId) -> ActivityInvitation:
        invitation = await self.invitation_repository.find_by_id(invitation_id)
        if invitation is None:
            raise NotFoundError("Invitation", str(invitation_id))
        return invitation

    async def send_invitations(
        self, activity_id: ActivityId, inviter_id: UserId, user_ids: Iterable[UserId]
    ) -> tuple[list[ActivityInvitation], dict[UserId, str]]:
        """Invite friends to an activity the inviter organizes.

        Each invitee is handled independently: users who are not accepted
        friends, the organizer themself and users already invited are
        reported as failures without aborting the rest.

        Args:
            activity_id: Activity to invite to
            inviter_id: Acting user (must be the organizer)
            user_ids: Users to invite

        Returns:
            Created invitations and a map of failed user ID to reason

        Raises:
            NotFoundError: If the activity does not exist
            NotAuthorizedError: If the inviter is not the organizer
            InvalidTransitionError: If the activity is cancelled
        """
        with logfire.span(
            "invitation_service.send_invitations",
            activity_id=str(activity_id),
            inviter_id=inviter_id,
        ):
            activity = await self.activity_service.get_activity(activity_id)
            if activity.creator_id != inviter_id:
                raise NotAuthorizedError("activity", str(activity_id), inviter_id)
            if activity.is_cancelled:
                raise InvalidTransitionError(
                    "activity", str(activity_id), activity.status.value, "invited"
                )

            friend_ids = await self.friendship_service.friend_ids(inviter_id)
            profile = await self.profile_repository.find_by_id(inviter_id)
            inviter_name = profile.display_name if profile else FALLBACK_NAME

            created: list[ActivityInvitation] = []
            failed: dict[UserId, str] = {}

            # dict.fromkeys keeps order while dropping repeated ids
            for user_id in dict.fromkeys(user_ids):
                if user_id == inviter_id:
                    failed[user_id] = "You cannot invite yourself"
                    continue
                if user_id not in friend_ids:
                    failed[user_id] = "You can only invite friends"
                    continue

                invitation = ActivityInvitation(
                    id=InvitationId(uuid4()),
                    activity_id=activity_id,
                    invited_user_id=user_id,
                    invited_by=inviter_id,
                    status=InvitationStatus.PENDING,
                    created_at=utcnow(),
                )
                try:
                    saved = await self.invitation_repository.insert(invitation)
                except DuplicateError:
                    failed[user_id] = "Already invited"
                    continue

                created.append(saved)
                self.notification_service.notify_activity_invitation(
                    invitee_id=user_id,
                    inviter_id=inviter_id,
                    inviter_name=inviter_name,
                    activity_id=str(activity_id),
                    activity_title=activity.title,
                    invitation_id=str(saved.id),
                )

            logfire.info(
                "Invitations sent",
                activity_id=str(activity_id),
                created=len(created),
                failed=len(failed),
            )
            return created, failed

    async def accept(
        self, invitation_id: InvitationId, responder_id: UserId
    ) -> ActivityInvitation:
        """Accept an invitation and join its activity.

        Join eligibility is checked before the invitation is touched; the
        status update and the participation insert share the caller's
        transaction. An existing participation counts as joined.

        Raises:
            NotFoundError: If the invitation or activity does not exist
            NotAuthorizedError: If the responder is not the addressee
            InvalidTransitionError: If the invitation is not pending
            BusinessRuleViolationError: If the activity cannot be joined
        """
        with logfire.span(
            "invitation_service.accept",
            invitation_id=str(invitation_id),
            responder_id=responder_id,
        ):
            invitation = await self._check_respondable(
                invitation_id, responder_id, InvitationStatus.ACCEPTED
            )

            await self.activity_service.ensure_can_join(
                invitation.activity_id, responder_id
            )

            accepted = await self._respond(
                invitation_id, responder_id, InvitationStatus.ACCEPTED
            )
            await self.activity_service.join(invitation.activity_id, responder_id)

            logfire.info(
                "Invitation accepted",
                invitation_id=str(invitation_id),
                activity_id=str(invitation.activity_id),
            )
            return accepted

    async def decline(
        self, invitation_id: InvitationId, responder_id: UserId
    ) -> ActivityInvitation:
        """Decline an invitation.

        Raises:
            NotFoundError: If the invitation does not exist
            NotAuthorizedError: If the responder is not the addressee
            InvalidTransitionError: If the invitation is not pending
        """
        with logfire.span(
            "invitation_service.decline",
            invitation_id=str(invitation_id),
            responder_id=responder_id,
        ):
            await self._check_respondable(
                invitation_id, responder_id, InvitationStatus.DECLINED
            )
            declined = await self._respond(
                invitation_id, responder_id, InvitationStatus.DECLINED
            )
            logfire.info("Invitation declined", invitation_id=str(invitation_id))
            return declined

    async def _check_respondable(
        self,
        invitation_id: InvitationId,
        responder_id: UserId,
        target: InvitationStatus,
    ) -> ActivityInvitation:
        invitation = await self._get(invitation_id)
        if invitation.invited_user_id != responder_id:
            logfire.warn(
                "Response on someone else's invitation",
                invitation_id=str(invitation_id),
                responder_id=responder_id,
            )
            raise NotAuthorizedError("invitation", str(invitation_id), responder_id)
        if not invitation.is_pending:
            raise InvalidTransitionError(
                "invitation", str(invitation_id), invitation.status.value, target.value
            )
        return invitation

    async def _respond(
        self,
        invitation_id: InvitationId,
        responder_id: UserId,
        status: InvitationStatus,
    ) -> ActivityInvitation:
        updated = await self.invitation_repository.respond(
            invitation_id, responder_id, status, utcnow()
        )
        if updated is None:
            # Answered or cancelled concurrently
            raise InvalidTransitionError(
                "invitation", str(invitation_id), "changed", status.value
            )
        return updated

    async def cancel(self, invitation_id: InvitationId, inviter_id: UserId) -> None:
        """Withdraw a pending invitation.

        Raises:
            NotFoundError: If the invitation does not exist
            NotAuthorizedError: If the user did not send it
            InvalidTransitionError: If it was already answered
        """
        with logfire.span(
            "invitation_service.cancel",
            invitation_id=str(invitation_id),
            inviter_id=inviter_id,
        ):
            invitation = await self._get(invitation_id)
            if invitation.invited_by != inviter_id:
                raise NotAuthorizedError("invitation", str(invitation_id), inviter_id)
            if not invitation.is_pending:
                raise InvalidTransitionError(
                    "invitation", str(invitation_id), invitation.status.value, "cancelled"
                )

            deleted = await self.invitation_repository.delete_pending(
                invitation_id, inviter_id
            )
            if not deleted:
                raise InvalidTransitionError(
                    "invitation", str(invitation_id), "changed", "cancelled"
                )
            logfire.info("Invitation cancelled", invitation_id=str(invitation_id))

    async def received(self, user_id: UserId) -> list[ActivityInvitation]:
        """Pending invitations addressed to ``user_id``, newest first."""
        return await self.invitation_repository.find_pending_for_user(user_id)

    async def sent_for_activity(
        self, activity_id: ActivityId, user_id: UserId
    ) -> list[ActivityInvitation]:
        """Invitations sent for an activity; only its organizer may list them.

        Raises:
            NotFoundError: If the activity does not exist
            NotAuthorizedError: If the user is not the organizer
        """
        activity = await self.activity_service.get_activity(activity_id)
        if activity.creator_id != user_id:
            raise NotAuthorizedError("activity", str(activity_id), user_id)
        return await self.invitation_repository.find_by_activity(activity_id)

    async def invited_activity_ids(self, user_id: UserId) -> set[ActivityId]:
        """Activities ``user_id`` holds a pending or accepted invitation to."""
        return await self.invitation_repository.find_open_activity_ids_for_user(user_id)
