"""Unit tests for the activity use cases."""

from datetime import timedelta

import pytest

from rally.application.usecase.activity import (
    ChangeParticipationUseCase,
    CreateActivityUseCase,
    GetActivityUseCase,
    GetFeedUseCase,
    ListMyActivitiesUseCase,
    ParticipationAction,
    UpdateActivityUseCase,
)
from rally.application.usecase.activity.change_participation import (
    ChangeParticipationRequest,
)
from rally.application.usecase.activity.create_activity import CreateActivityRequest
from rally.application.usecase.activity.get_activity import GetActivityRequest
from rally.application.usecase.activity.get_feed import GetFeedRequest
from rally.application.usecase.activity.list_my_activities import (
    ListMyActivitiesRequest,
)
from rally.application.usecase.activity.update_activity import UpdateActivityRequest
from rally.domain.error import NotFoundError, ValidationError
from rally.domain.repository import (
    ActivityRepository,
    FriendshipRepository,
    ProfileRepository,
)
from rally.domain.service import ActivityService, InvitationService
from rally.domain.validation import ACTIVITY_FULL
from rally.domain.value import ActivityVisibility, UserId, VisibilityChoice
from rally.util.time import utcnow
from tests.conftest import make_activity, make_friendship, make_profile
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

HOST = UserId("host")
FRIEND = UserId("friend")
STRANGER = UserId("stranger")


async def seed_people(env) -> None:
    profiles = await env.get(ProfileRepository)
    friendships = await env.get(FriendshipRepository)
    for user_id in (HOST, FRIEND, STRANGER):
        await profiles.upsert(make_profile(user_id))
    await friendships.insert(make_friendship(HOST, FRIEND))


class TestCreateActivityUseCase:
    """Tests for CreateActivityUseCase."""

    @pytest.mark.asyncio
    async def test_specific_friends_invites_selected_friends(self, unit_env):
        """Invitations go out right after the activity is stored."""
        # Arrange
        await seed_people(unit_env)
        use_case = await unit_env.get(CreateActivityUseCase)
        invitations = await unit_env.get(InvitationService)

        # Act
        response = await use_case.execute(
            CreateActivityRequest(
                user_id=HOST,
                title="Secret swim",
                starts_at=utcnow() + timedelta(days=1),
                visibility=VisibilityChoice.SPECIFIC_FRIENDS,
                invitee_ids=[FRIEND, STRANGER],
            )
        )

        # Assert
        assert response.activity.visibility == ActivityVisibility.PRIVATE.value
        assert response.invited_user_ids == [FRIEND]
        assert response.failed_invitations == {STRANGER: "You can only invite friends"}
        received = await invitations.received(FRIEND)
        assert str(received[0].activity_id) == response.activity.activity_id

    @pytest.mark.asyncio
    async def test_specific_friends_requires_invitees(self, unit_env):
        use_case = await unit_env.get(CreateActivityUseCase)
        activities = await unit_env.get(ActivityService)

        with pytest.raises(ValidationError, match="Select at least one friend"):
            await use_case.execute(
                CreateActivityRequest(
                    user_id=HOST,
                    title="Secret swim",
                    starts_at=utcnow() + timedelta(days=1),
                    visibility=VisibilityChoice.SPECIFIC_FRIENDS,
                )
            )
        assert await activities.list_created(HOST) == []

    @pytest.mark.asyncio
    async def test_default_capacity_and_organizer_view(self, unit_env):
        """Omitted capacity uses the configured default."""
        await seed_people(unit_env)
        use_case = await unit_env.get(CreateActivityUseCase)

        response = await use_case.execute(
            CreateActivityRequest(
                user_id=HOST,
                title="Park run",
                starts_at=utcnow() + timedelta(days=1),
            )
        )

        activity = response.activity
        assert activity.max_participants == 10
        assert activity.visibility == "friends"
        assert activity.is_organizer is True
        assert activity.can_join is False
        assert activity.creator.display_name == "Host"
        assert response.invited_user_ids == []


class TestFeedAndDetails:
    """Tests for feed, details and personal lists."""

    @pytest.mark.asyncio
    async def test_feed_items_are_enriched(self, unit_env):
        """Feed items carry participants, spots left and eligibility."""
        # Arrange
        await seed_people(unit_env)
        repo = await unit_env.get(ActivityRepository)
        activities = await unit_env.get(ActivityService)
        activity = await repo.insert(make_activity(HOST, max_participants=2))
        await activities.join(activity.id, STRANGER)
        use_case = await unit_env.get(GetFeedUseCase)

        # Act
        response = await use_case.execute(GetFeedRequest(user_id=FRIEND))

        # Assert
        assert response.total == 1
        item = response.activities[0]
        assert item.participant_count == 1
        assert item.spots_left == 1
        assert [p.user_id for p in item.participants] == [STRANGER]
        assert item.can_join is True
        assert item.join_blockers == []

    @pytest.mark.asyncio
    async def test_strangers_do_not_see_friends_only_activity(self, unit_env):
        await seed_people(unit_env)
        repo = await unit_env.get(ActivityRepository)
        await repo.insert(make_activity(HOST))
        use_case = await unit_env.get(GetFeedUseCase)

        response = await use_case.execute(GetFeedRequest(user_id=STRANGER))

        assert response.activities == []

    @pytest.mark.asyncio
    async def test_hidden_activity_looks_missing(self, unit_env):
        """Activities the viewer may not see are reported as not found."""
        await seed_people(unit_env)
        repo = await unit_env.get(ActivityRepository)
        activity = await repo.insert(
            make_activity(HOST, visibility=ActivityVisibility.PRIVATE)
        )
        use_case = await unit_env.get(GetActivityUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(
                GetActivityRequest(user_id=FRIEND, activity_id=activity.id)
            )

    @pytest.mark.asyncio
    async def test_invitee_sees_private_activity(self, unit_env):
        await seed_people(unit_env)
        repo = await unit_env.get(ActivityRepository)
        invitations = await unit_env.get(InvitationService)
        activity = await repo.insert(
            make_activity(HOST, visibility=ActivityVisibility.PRIVATE)
        )
        await invitations.send_invitations(activity.id, HOST, [FRIEND])
        use_case = await unit_env.get(GetActivityUseCase)

        response = await use_case.execute(
            GetActivityRequest(user_id=FRIEND, activity_id=activity.id)
        )

        assert response.activity.activity_id == str(activity.id)

    @pytest.mark.asyncio
    async def test_list_mine_splits_created_and_joined(self, unit_env):
        """Cancelled joined activities are hidden unless asked for."""
        # Arrange
        await seed_people(unit_env)
        repo = await unit_env.get(ActivityRepository)
        activities = await unit_env.get(ActivityService)
        mine = await repo.insert(make_activity(FRIEND, title="My ride"))
        joined = await repo.insert(make_activity(HOST, title="Joined run"))
        dropped = await repo.insert(make_activity(HOST, title="Called off"))
        await activities.join(joined.id, FRIEND)
        await activities.join(dropped.id, FRIEND)
        await activities.cancel_activity(dropped.id, HOST)
        use_case = await unit_env.get(ListMyActivitiesUseCase)

        # Act
        default = await use_case.execute(ListMyActivitiesRequest(user_id=FRIEND))
        everything = await use_case.execute(
            ListMyActivitiesRequest(user_id=FRIEND, include_cancelled=True)
        )

        # Assert
        assert [a.activity_id for a in default.created] == [str(mine.id)]
        assert [a.activity_id for a in default.joined] == [str(joined.id)]
        assert {a.activity_id for a in everything.joined} == {
            str(joined.id),
            str(dropped.id),
        }


class TestParticipationAndEdits:
    """Tests for joining, leaving and editing through use cases."""

    @pytest.mark.asyncio
    async def test_join_then_leave(self, unit_env):
        await seed_people(unit_env)
        repo = await unit_env.get(ActivityRepository)
        activity = await repo.insert(make_activity(HOST, max_participants=1))
        use_case = await unit_env.get(ChangeParticipationUseCase)

        joined = await use_case.execute(
            ChangeParticipationRequest(
                user_id=FRIEND, activity_id=activity.id, action=ParticipationAction.JOIN
            )
        )
        left = await use_case.execute(
            ChangeParticipationRequest(
                user_id=FRIEND, activity_id=activity.id, action=ParticipationAction.LEAVE
            )
        )

        assert joined.changed is True
        assert joined.activity.is_participant is True
        assert joined.activity.can_leave is True
        assert ACTIVITY_FULL in joined.activity.join_blockers
        assert left.changed is True
        assert left.activity.participant_count == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "visibility", [ActivityVisibility.PRIVATE, ActivityVisibility.FRIENDS]
    )
    async def test_stranger_cannot_join_hidden_activity(self, unit_env, visibility):
        """Joining an activity the user cannot see fails like a missing one."""
        # Arrange
        await seed_people(unit_env)
        repo = await unit_env.get(ActivityRepository)
        activities = await unit_env.get(ActivityService)
        activity = await repo.insert(make_activity(HOST, visibility=visibility))
        use_case = await unit_env.get(ChangeParticipationUseCase)

        # Act
        with pytest.raises(NotFoundError):
            await use_case.execute(
                ChangeParticipationRequest(
                    user_id=STRANGER,
                    activity_id=activity.id,
                    action=ParticipationAction.JOIN,
                )
            )

        # Assert
        assert await activities.participant_ids(activity.id) == set()

    @pytest.mark.asyncio
    async def test_invitee_can_join_private_activity(self, unit_env):
        await seed_people(unit_env)
        repo = await unit_env.get(ActivityRepository)
        invitations = await unit_env.get(InvitationService)
        activity = await repo.insert(
            make_activity(HOST, visibility=ActivityVisibility.PRIVATE)
        )
        await invitations.send_invitations(activity.id, HOST, [FRIEND])
        use_case = await unit_env.get(ChangeParticipationUseCase)

        response = await use_case.execute(
            ChangeParticipationRequest(
                user_id=FRIEND, activity_id=activity.id, action=ParticipationAction.JOIN
            )
        )

        assert response.changed is True
        assert response.activity.is_participant is True

    @pytest.mark.asyncio
    async def test_update_without_changes_is_rejected(self, unit_env):
        await seed_people(unit_env)
        repo = await unit_env.get(ActivityRepository)
        activity = await repo.insert(make_activity(HOST))
        use_case = await unit_env.get(UpdateActivityUseCase)

        with pytest.raises(ValidationError, match="No changes provided"):
            await use_case.execute(
                UpdateActivityRequest(user_id=HOST, activity_id=activity.id)
            )

    @pytest.mark.asyncio
    async def test_update_applies_only_sent_fields(self, unit_env):
        await seed_people(unit_env)
        repo = await unit_env.get(ActivityRepository)
        activity = await repo.insert(make_activity(HOST, title="Morning run"))
        use_case = await unit_env.get(UpdateActivityUseCase)

        response = await use_case.execute(
            UpdateActivityRequest(
                user_id=HOST, activity_id=activity.id, description="Bring water"
            )
        )

        assert response.activity.title == "Morning run"
        assert response.activity.description == "Bring water"
