"""Unit tests for the invitation use cases."""

from datetime import timedelta

import pytest

from rally.application.usecase.invitation import (
    CancelInvitationUseCase,
    ListReceivedInvitationsUseCase,
    ListSentInvitationsUseCase,
    RespondInvitationUseCase,
    SendInvitationsUseCase,
)
from rally.application.usecase.invitation.cancel_invitation import (
    CancelInvitationRequest,
)
from rally.application.usecase.invitation.list_invitations import (
    ListReceivedInvitationsRequest,
    ListSentInvitationsRequest,
)
from rally.application.usecase.invitation.respond_invitation import (
    InvitationResponse,
    RespondInvitationRequest,
)
from rally.application.usecase.invitation.send_invitations import (
    SendInvitationsRequest,
)
from rally.domain.error import NotAuthorizedError
from rally.domain.repository import (
    ActivityRepository,
    FriendshipRepository,
    ProfileRepository,
)
from rally.domain.service import ActivityService
from rally.domain.value import UserId
from tests.conftest import make_activity, make_friendship, make_profile
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

HOST = UserId("host")
GUEST = UserId("guest")


async def seed(env, **activity_kwargs):
    profiles = await env.get(ProfileRepository)
    friendships = await env.get(FriendshipRepository)
    activities = await env.get(ActivityRepository)
    for user_id in (HOST, GUEST):
        await profiles.upsert(make_profile(user_id))
    await friendships.insert(make_friendship(HOST, GUEST))
    return await activities.insert(make_activity(HOST, **activity_kwargs))


async def invite(env, activity) -> str:
    use_case = await env.get(SendInvitationsUseCase)
    await use_case.execute(
        SendInvitationsRequest(user_id=HOST, activity_id=activity.id, invitee_ids=[GUEST])
    )
    received = await (await env.get(ListReceivedInvitationsUseCase)).execute(
        ListReceivedInvitationsRequest(user_id=GUEST)
    )
    return received.invitations[0].invitation_id


class TestSendAndList:
    """Tests for sending and listing invitations."""

    @pytest.mark.asyncio
    async def test_received_invitation_carries_activity_and_inviter(self, unit_env):
        # Arrange
        activity = await seed(unit_env, title="Hill repeats")
        send = await unit_env.get(SendInvitationsUseCase)
        list_received = await unit_env.get(ListReceivedInvitationsUseCase)

        # Act
        sent = await send.execute(
            SendInvitationsRequest(
                user_id=HOST, activity_id=activity.id, invitee_ids=[GUEST, "nobody"]
            )
        )
        received = await list_received.execute(
            ListReceivedInvitationsRequest(user_id=GUEST)
        )

        # Assert
        assert sent.invited_user_ids == [GUEST]
        assert sent.failed == {"nobody": "You can only invite friends"}
        item = received.invitations[0]
        assert item.activity.title == "Hill repeats"
        assert item.activity.can_join is True
        assert item.invited_by.display_name == "Host"

    @pytest.mark.asyncio
    async def test_received_hides_cancelled_and_past_activities(self, unit_env):
        """Invitations to activities that can no longer happen are hidden."""
        activity = await seed(unit_env)
        await invite(unit_env, activity)
        activities = await unit_env.get(ActivityService)
        await activities.cancel_activity(activity.id, HOST)
        use_case = await unit_env.get(ListReceivedInvitationsUseCase)

        received = await use_case.execute(ListReceivedInvitationsRequest(user_id=GUEST))

        assert received.invitations == []

    @pytest.mark.asyncio
    async def test_sent_list_shows_answers(self, unit_env):
        activity = await seed(unit_env)
        invitation_id = await invite(unit_env, activity)
        respond = await unit_env.get(RespondInvitationUseCase)
        await respond.execute(
            RespondInvitationRequest(
                user_id=GUEST,
                invitation_id=invitation_id,
                response=InvitationResponse.DECLINE,
            )
        )
        use_case = await unit_env.get(ListSentInvitationsUseCase)

        sent = await use_case.execute(
            ListSentInvitationsRequest(user_id=HOST, activity_id=activity.id)
        )

        assert [(i.invitee.user_id, i.status) for i in sent.invitations] == [
            (GUEST, "declined")
        ]
        assert sent.invitations[0].responded_at is not None

    @pytest.mark.asyncio
    async def test_sent_list_is_organizer_only(self, unit_env):
        activity = await seed(unit_env)
        use_case = await unit_env.get(ListSentInvitationsUseCase)

        with pytest.raises(NotAuthorizedError):
            await use_case.execute(
                ListSentInvitationsRequest(user_id=GUEST, activity_id=activity.id)
            )


class TestRespondAndCancel:
    """Tests for answering and withdrawing invitations."""

    @pytest.mark.asyncio
    async def test_accept_joins_activity(self, unit_env):
        activity = await seed(unit_env, starts_in=timedelta(days=2))
        invitation_id = await invite(unit_env, activity)
        use_case = await unit_env.get(RespondInvitationUseCase)
        activities = await unit_env.get(ActivityService)

        response = await use_case.execute(
            RespondInvitationRequest(
                user_id=GUEST,
                invitation_id=invitation_id,
                response=InvitationResponse.ACCEPT,
            )
        )

        assert response.status == "accepted"
        assert response.activity_id == str(activity.id)
        assert await activities.participant_ids(activity.id) == {GUEST}

    @pytest.mark.asyncio
    async def test_cancel(self, unit_env):
        activity = await seed(unit_env)
        invitation_id = await invite(unit_env, activity)
        use_case = await unit_env.get(CancelInvitationUseCase)

        response = await use_case.execute(
            CancelInvitationRequest(user_id=HOST, invitation_id=invitation_id)
        )

        assert response.success is True
        assert response.message == "Invitation cancelled"
