"""Unit tests for InvitationService."""

from uuid import uuid4

import pytest

from rally.domain.error import (
    BusinessRuleViolationError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
)
from rally.domain.repository import (
    ActivityRepository,
    FriendshipRepository,
    ProfileRepository,
)
from rally.domain.service import (
    ActivityService,
    InvitationService,
    NotificationService,
    drain_notifications,
)
from rally.domain.validation import ACTIVITY_FULL
from rally.domain.value import (
    FriendshipStatus,
    InvitationId,
    InvitationStatus,
    NotificationType,
    UserId,
)
from tests.conftest import make_activity, make_friendship, make_profile
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

HOST = UserId("host")
FRIEND = UserId("friend")
SECOND = UserId("second")
STRANGER = UserId("stranger")


async def seed_world(env, max_participants: int = 10):
    """Host with two friends, one stranger and one upcoming activity."""
    profiles = await env.get(ProfileRepository)
    friendships = await env.get(FriendshipRepository)
    activities = await env.get(ActivityRepository)

    for user_id in (HOST, FRIEND, SECOND, STRANGER):
        await profiles.upsert(make_profile(user_id))
    await friendships.insert(make_friendship(HOST, FRIEND))
    await friendships.insert(make_friendship(SECOND, HOST))
    await friendships.insert(
        make_friendship(HOST, STRANGER, status=FriendshipStatus.PENDING)
    )
    return await activities.insert(
        make_activity(HOST, title="Padel night", max_participants=max_participants)
    )


class TestSendInvitations:
    """Tests for send_invitations."""

    @pytest.mark.asyncio
    async def test_invites_friends_and_reports_failures(self, unit_env):
        """Each invitee succeeds or fails on its own."""
        # Arrange
        activity = await seed_world(unit_env)
        service = await unit_env.get(InvitationService)

        # Act
        created, failed = await service.send_invitations(
            activity.id, HOST, [FRIEND, STRANGER, HOST, FRIEND]
        )

        # Assert
        assert [inv.invited_user_id for inv in created] == [FRIEND]
        assert created[0].status == InvitationStatus.PENDING
        assert failed == {
            STRANGER: "You can only invite friends",
            HOST: "You cannot invite yourself",
        }

    @pytest.mark.asyncio
    async def test_second_invitation_reports_already_invited(self, unit_env):
        activity = await seed_world(unit_env)
        service = await unit_env.get(InvitationService)
        await service.send_invitations(activity.id, HOST, [FRIEND])

        created, failed = await service.send_invitations(
            activity.id, HOST, [FRIEND, SECOND]
        )

        assert [inv.invited_user_id for inv in created] == [SECOND]
        assert failed == {FRIEND: "Already invited"}

    @pytest.mark.asyncio
    async def test_invitation_notifies_invitee(self, unit_env):
        """Invitee gets a notification pointing at the invitation."""
        # Arrange
        activity = await seed_world(unit_env)
        service = await unit_env.get(InvitationService)
        notifications = await unit_env.get(NotificationService)

        # Act
        created, _ = await service.send_invitations(activity.id, HOST, [FRIEND])
        await drain_notifications()

        # Assert
        inbox = await notifications.list_notifications(FRIEND)
        assert len(inbox) == 1
        assert inbox[0].type == NotificationType.ACTIVITY_INVITATION
        assert inbox[0].message == "Host invited you to Padel night"
        assert inbox[0].metadata["invitation_id"] == str(created[0].id)
        assert inbox[0].metadata["activity_id"] == str(activity.id)

    @pytest.mark.asyncio
    async def test_only_organizer_can_invite(self, unit_env):
        activity = await seed_world(unit_env)
        service = await unit_env.get(InvitationService)

        with pytest.raises(NotAuthorizedError):
            await service.send_invitations(activity.id, FRIEND, [SECOND])

    @pytest.mark.asyncio
    async def test_cannot_invite_to_cancelled_activity(self, unit_env):
        activity = await seed_world(unit_env)
        service = await unit_env.get(InvitationService)
        activity_service = await unit_env.get(ActivityService)
        await activity_service.cancel_activity(activity.id, HOST)

        with pytest.raises(InvalidTransitionError):
            await service.send_invitations(activity.id, HOST, [FRIEND])


class TestRespond:
    """Tests for accept and decline."""

    @pytest.mark.asyncio
    async def test_accept_joins_activity(self, unit_env):
        """Accepting stamps the response and creates the participation."""
        # Arrange
        activity = await seed_world(unit_env)
        service = await unit_env.get(InvitationService)
        activity_service = await unit_env.get(ActivityService)
        created, _ = await service.send_invitations(activity.id, HOST, [FRIEND])

        # Act
        accepted = await service.accept(created[0].id, FRIEND)

        # Assert
        assert accepted.status == InvitationStatus.ACCEPTED
        assert accepted.responded_at is not None
        assert await activity_service.participant_ids(activity.id) == {FRIEND}
        assert await service.received(FRIEND) == []
        assert await service.invited_activity_ids(FRIEND) == {activity.id}

    @pytest.mark.asyncio
    async def test_accept_after_joining_directly(self, unit_env):
        """An existing participation counts as joined."""
        activity = await seed_world(unit_env)
        service = await unit_env.get(InvitationService)
        activity_service = await unit_env.get(ActivityService)
        created, _ = await service.send_invitations(activity.id, HOST, [FRIEND])
        await activity_service.join(activity.id, FRIEND)

        accepted = await service.accept(created[0].id, FRIEND)

        assert accepted.status == InvitationStatus.ACCEPTED
        assert await activity_service.participant_ids(activity.id) == {FRIEND}

    @pytest.mark.asyncio
    async def test_accept_full_activity_leaves_invitation_pending(self, unit_env):
        """A refused join does not consume the invitation."""
        # Arrange
        activity = await seed_world(unit_env, max_participants=2)
        service = await unit_env.get(InvitationService)
        activity_service = await unit_env.get(ActivityService)
        created, _ = await service.send_invitations(activity.id, HOST, [FRIEND])
        await activity_service.join(activity.id, SECOND)
        await activity_service.join(activity.id, STRANGER)

        # Act & Assert
        with pytest.raises(BusinessRuleViolationError, match=ACTIVITY_FULL):
            await service.accept(created[0].id, FRIEND)
        pending = await service.received(FRIEND)
        assert [inv.id for inv in pending] == [created[0].id]

    @pytest.mark.asyncio
    async def test_decline_is_terminal(self, unit_env):
        activity = await seed_world(unit_env)
        service = await unit_env.get(InvitationService)
        created, _ = await service.send_invitations(activity.id, HOST, [FRIEND])

        declined = await service.decline(created[0].id, FRIEND)

        assert declined.status == InvitationStatus.DECLINED
        with pytest.raises(InvalidTransitionError):
            await service.accept(created[0].id, FRIEND)
        assert await service.invited_activity_ids(FRIEND) == set()

    @pytest.mark.asyncio
    async def test_only_addressee_can_respond(self, unit_env):
        activity = await seed_world(unit_env)
        service = await unit_env.get(InvitationService)
        created, _ = await service.send_invitations(activity.id, HOST, [FRIEND])

        with pytest.raises(NotAuthorizedError):
            await service.decline(created[0].id, SECOND)

    @pytest.mark.asyncio
    async def test_respond_to_unknown_invitation(self, unit_env):
        service = await unit_env.get(InvitationService)

        with pytest.raises(NotFoundError):
            await service.accept(InvitationId(uuid4()), FRIEND)


class TestCancelAndList:
    """Tests for cancel and the listing queries."""

    @pytest.mark.asyncio
    async def test_inviter_cancels_pending_invitation(self, unit_env):
        activity = await seed_world(unit_env)
        service = await unit_env.get(InvitationService)
        created, _ = await service.send_invitations(activity.id, HOST, [FRIEND])

        await service.cancel(created[0].id, HOST)

        assert await service.received(FRIEND) == []
        assert await service.sent_for_activity(activity.id, HOST) == []

    @pytest.mark.asyncio
    async def test_cannot_cancel_answered_invitation(self, unit_env):
        activity = await seed_world(unit_env)
        service = await unit_env.get(InvitationService)
        created, _ = await service.send_invitations(activity.id, HOST, [FRIEND])
        await service.decline(created[0].id, FRIEND)

        with pytest.raises(InvalidTransitionError):
            await service.cancel(created[0].id, HOST)

    @pytest.mark.asyncio
    async def test_invitee_cannot_cancel(self, unit_env):
        activity = await seed_world(unit_env)
        service = await unit_env.get(InvitationService)
        created, _ = await service.send_invitations(activity.id, HOST, [FRIEND])

        with pytest.raises(NotAuthorizedError):
            await service.cancel(created[0].id, FRIEND)

    @pytest.mark.asyncio
    async def test_sent_for_activity_is_organizer_only(self, unit_env):
        activity = await seed_world(unit_env)
        service = await unit_env.get(InvitationService)
        await service.send_invitations(activity.id, HOST, [FRIEND, SECOND])

        sent = await service.sent_for_activity(activity.id, HOST)

        assert {inv.invited_user_id for inv in sent} == {FRIEND, SECOND}
        with pytest.raises(NotAuthorizedError):
            await service.sent_for_activity(activity.id, FRIEND)
