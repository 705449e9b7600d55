"""Unit tests for ActivityService."""

from datetime import timedelta
from uuid import uuid4

import pytest

from rally.domain.error import (
    BusinessRuleViolationError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from rally.domain.repository import ActivityRepository
from rally.domain.service import ActivityService
from rally.domain.validation import (
    ACTIVITY_CANCELLED,
    ACTIVITY_FULL,
    IS_CREATOR_JOIN,
    IS_CREATOR_LEAVE,
)
from rally.domain.value import (
    ActivityId,
    ActivityStatus,
    ActivityType,
    ActivityVisibility,
    Location,
    UserId,
    VisibilityChoice,
)
from rally.util.time import utcnow
from tests.conftest import make_activity
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

ORGANIZER = UserId("organizer")
RUNNER = UserId("runner")
OTHER = UserId("other")


async def seed_activity(env, **kwargs):
    repo = await env.get(ActivityRepository)
    return await repo.insert(make_activity(ORGANIZER, **kwargs))


class TestCreateActivity:
    """Tests for create_activity."""

    @pytest.mark.asyncio
    async def test_create_activity_maps_visibility_and_sanitizes(self, unit_env):
        """Created activity stores the mapped visibility and cleaned text."""
        # Arrange
        service = await unit_env.get(ActivityService)
        starts_at = utcnow() + timedelta(days=2)

        # Act
        activity = await service.create_activity(
            creator_id=ORGANIZER,
            title="  <b>Sunday ride</b> ",
            starts_at=starts_at,
            max_participants=6,
            visibility=VisibilityChoice.SPECIFIC_FRIENDS,
            activity_type=ActivityType.CYCLING,
            location=Location(place_name="Vondelpark", lat=52.358, lng=4.868),
            distance="40 km",
        )

        # Assert
        assert activity.title == "bSunday ride/b"
        assert activity.visibility == ActivityVisibility.PRIVATE
        assert activity.status == ActivityStatus.ACTIVE
        assert activity.location.place_name == "Vondelpark"
        assert await service.get_activity(activity.id) == activity

    @pytest.mark.asyncio
    async def test_create_activity_collects_every_error(self, unit_env):
        """Validation reports all failing fields at once."""
        service = await unit_env.get(ActivityService)

        with pytest.raises(ValidationError) as exc_info:
            await service.create_activity(
                creator_id=ORGANIZER,
                title="Yo",
                starts_at=utcnow() - timedelta(hours=1),
                max_participants=51,
                visibility=VisibilityChoice.ALL_FRIENDS,
            )

        assert exc_info.value.errors == [
            "Title must be at least 3 characters",
            "Date must be in the future",
            "Maximum 50 participants allowed",
        ]

    @pytest.mark.asyncio
    async def test_create_activity_rejects_unknown_visibility(self, unit_env):
        service = await unit_env.get(ActivityService)

        with pytest.raises(ValidationError, match="Unknown visibility"):
            await service.create_activity(
                creator_id=ORGANIZER,
                title="Tennis doubles",
                starts_at=utcnow() + timedelta(days=1),
                max_participants=4,
                visibility="everyone",
            )


class TestUpdateAndCancel:
    """Tests for organizer-only lifecycle operations."""

    @pytest.mark.asyncio
    async def test_update_activity_changes_fields(self, unit_env):
        """Organizer can edit details without moving the start time."""
        # Arrange
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)

        # Act
        updated = await service.update_activity(
            activity.id, ORGANIZER, {"title": "Evening run", "duration": "1h"}
        )

        # Assert
        assert updated.title == "Evening run"
        assert updated.duration == "1h"
        assert updated.starts_at == activity.starts_at
        assert updated.updated_at >= activity.updated_at

    @pytest.mark.asyncio
    async def test_update_by_non_organizer_raises(self, unit_env):
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)

        with pytest.raises(NotAuthorizedError):
            await service.update_activity(activity.id, RUNNER, {"title": "Mine now"})

    @pytest.mark.asyncio
    async def test_update_rejects_non_editable_fields(self, unit_env):
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)

        with pytest.raises(ValidationError, match="Field cannot be edited: status"):
            await service.update_activity(activity.id, ORGANIZER, {"status": "cancelled"})

    @pytest.mark.asyncio
    async def test_update_capacity_below_participants_raises(self, unit_env):
        """Capacity cannot drop below the number of people who joined."""
        # Arrange
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env, max_participants=5)
        for user_id in ("p1", "p2", "p3"):
            await service.join(activity.id, UserId(user_id))

        # Act & Assert
        with pytest.raises(ValidationError, match="Capacity cannot be lower"):
            await service.update_activity(activity.id, ORGANIZER, {"max_participants": 2})

    @pytest.mark.asyncio
    async def test_cancel_keeps_activity_with_cancelled_status(self, unit_env):
        """Cancelling is a status change, never a delete."""
        # Arrange
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)

        # Act
        cancelled = await service.cancel_activity(activity.id, ORGANIZER)

        # Assert
        assert cancelled.status == ActivityStatus.CANCELLED
        assert (await service.get_activity(activity.id)).is_cancelled

    @pytest.mark.asyncio
    async def test_cancel_twice_raises_invalid_transition(self, unit_env):
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)
        await service.cancel_activity(activity.id, ORGANIZER)

        with pytest.raises(InvalidTransitionError):
            await service.cancel_activity(activity.id, ORGANIZER)

    @pytest.mark.asyncio
    async def test_edit_cancelled_activity_raises_invalid_transition(self, unit_env):
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)
        await service.cancel_activity(activity.id, ORGANIZER)

        with pytest.raises(InvalidTransitionError):
            await service.update_activity(activity.id, ORGANIZER, {"title": "Back on"})


class TestTransferOwnership:
    """Tests for transfer_ownership."""

    @pytest.mark.asyncio
    async def test_transfer_swaps_organizer_and_participant(self, unit_env):
        """Previous organizer becomes a participant; capacity is unchanged."""
        # Arrange
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)
        await service.join(activity.id, RUNNER)

        # Act
        transferred = await service.transfer_ownership(activity.id, ORGANIZER, RUNNER)

        # Assert
        assert transferred.creator_id == RUNNER
        assert await service.participant_ids(activity.id) == {ORGANIZER}

    @pytest.mark.asyncio
    async def test_transfer_to_non_participant_raises(self, unit_env):
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)

        with pytest.raises(BusinessRuleViolationError, match="must be a participant"):
            await service.transfer_ownership(activity.id, ORGANIZER, OTHER)


class TestJoinAndLeave:
    """Tests for join and leave."""

    @pytest.mark.asyncio
    async def test_join_adds_participant_once(self, unit_env):
        """Joining twice is a no-op."""
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)

        assert await service.join(activity.id, RUNNER) is True
        assert await service.join(activity.id, RUNNER) is False
        assert await service.participant_ids(activity.id) == {RUNNER}

    @pytest.mark.asyncio
    async def test_join_full_activity_raises_with_reason(self, unit_env):
        """Capacity counts participation rows, not the organizer."""
        # Arrange
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env, max_participants=2)
        await service.join(activity.id, RUNNER)
        await service.join(activity.id, OTHER)

        # Act & Assert
        with pytest.raises(BusinessRuleViolationError) as exc_info:
            await service.join(activity.id, UserId("late"))
        assert exc_info.value.reasons == [ACTIVITY_FULL]

    @pytest.mark.asyncio
    async def test_already_joined_on_full_activity_is_no_op(self, unit_env):
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env, max_participants=2)
        await service.join(activity.id, RUNNER)
        await service.join(activity.id, OTHER)

        assert await service.join(activity.id, RUNNER) is False

    @pytest.mark.asyncio
    async def test_organizer_cannot_join_own_activity(self, unit_env):
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)

        with pytest.raises(BusinessRuleViolationError, match=IS_CREATOR_JOIN):
            await service.join(activity.id, ORGANIZER)

    @pytest.mark.asyncio
    async def test_join_cancelled_activity_raises(self, unit_env):
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)
        await service.cancel_activity(activity.id, ORGANIZER)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            await service.join(activity.id, RUNNER)
        assert ACTIVITY_CANCELLED in exc_info.value.reasons

    @pytest.mark.asyncio
    async def test_join_unknown_activity_raises_not_found(self, unit_env):
        service = await unit_env.get(ActivityService)

        with pytest.raises(NotFoundError):
            await service.join(ActivityId(uuid4()), RUNNER)

    @pytest.mark.asyncio
    async def test_leave_removes_participation(self, unit_env):
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)
        await service.join(activity.id, RUNNER)

        assert await service.leave(activity.id, RUNNER) is True
        assert await service.leave(activity.id, RUNNER) is False
        assert await service.participant_ids(activity.id) == set()

    @pytest.mark.asyncio
    async def test_organizer_cannot_leave(self, unit_env):
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)

        with pytest.raises(BusinessRuleViolationError, match=IS_CREATOR_LEAVE):
            await service.leave(activity.id, ORGANIZER)


class TestFeed:
    """Tests for the upcoming activity feed."""

    @pytest.mark.asyncio
    async def test_feed_shows_what_the_viewer_may_see(self, unit_env):
        """Friends' activities, public ones and invitations are visible."""
        # Arrange
        service = await unit_env.get(ActivityService)
        repo = await unit_env.get(ActivityRepository)
        friends_only = await seed_activity(unit_env, title="Friends run")
        public = await repo.insert(
            make_activity(
                "stranger", title="Open game", visibility=ActivityVisibility.PUBLIC
            )
        )
        hidden = await repo.insert(
            make_activity("stranger", visibility=ActivityVisibility.FRIENDS)
        )
        invited = await repo.insert(
            make_activity(
                "stranger",
                starts_in=timedelta(days=3),
                visibility=ActivityVisibility.PRIVATE,
            )
        )
        await repo.insert(make_activity(RUNNER, title="My own run"))
        await repo.insert(make_activity(ORGANIZER, starts_in=timedelta(days=20)))

        # Act
        feed = await service.feed(
            RUNNER, friend_ids={ORGANIZER}, invited_activity_ids={invited.id}
        )

        # Assert
        ids = [activity.id for activity in feed]
        assert set(ids) == {friends_only.id, public.id, invited.id}
        assert hidden.id not in ids
        assert ids[-1] == invited.id

    @pytest.mark.asyncio
    async def test_feed_excludes_cancelled(self, unit_env):
        service = await unit_env.get(ActivityService)
        activity = await seed_activity(unit_env)
        await service.cancel_activity(activity.id, ORGANIZER)

        assert await service.feed(RUNNER, {ORGANIZER}, set()) == []

    @pytest.mark.asyncio
    async def test_feed_window_is_capped(self, unit_env):
        """Requests beyond the maximum window are clamped, not rejected."""
        service = await unit_env.get(ActivityService)
        near = await seed_activity(unit_env, starts_in=timedelta(days=25))
        await seed_activity(unit_env, starts_in=timedelta(days=45))

        feed = await service.feed(RUNNER, {ORGANIZER}, set(), days_ahead=365)

        assert [activity.id for activity in feed] == [near.id]

    @pytest.mark.asyncio
    async def test_feed_rejects_non_positive_window(self, unit_env):
        service = await unit_env.get(ActivityService)

        with pytest.raises(ValidationError):
            await service.feed(RUNNER, set(), set(), days_ahead=0)
