"""Unit tests for the friend use cases."""

from datetime import timedelta

import pytest

from rally.application.usecase.friend import (
    DiscoverPeopleUseCase,
    FriendshipAction,
    GetFriendsUseCase,
    ManageFriendshipUseCase,
)
from rally.application.usecase.friend.discover_people import DiscoverPeopleRequest
from rally.application.usecase.friend.get_friends import GetFriendsRequest
from rally.application.usecase.friend.manage_friendship import ManageFriendshipRequest
from rally.domain.error import NotAuthorizedError
from rally.domain.repository import FriendshipRepository, ProfileRepository
from rally.domain.value import FriendshipStatus, Location, RelationshipStatus, UserId
from rally.util.time import utcnow
from tests.conftest import make_friendship, make_profile
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

ME = UserId("me")


def action(other: str, kind: FriendshipAction) -> ManageFriendshipRequest:
    return ManageFriendshipRequest(user_id=ME, other_user_id=other, action=kind)


class TestManageFriendshipUseCase:
    """Tests for ManageFriendshipUseCase."""

    @pytest.mark.asyncio
    async def test_request_then_repeat_is_no_op(self, unit_env):
        """Repeating a request reports no change."""
        # Arrange
        profiles = await unit_env.get(ProfileRepository)
        await profiles.upsert(make_profile("zoe"))
        use_case = await unit_env.get(ManageFriendshipUseCase)

        # Act
        first = await use_case.execute(action("zoe", FriendshipAction.REQUEST))
        second = await use_case.execute(action("zoe", FriendshipAction.REQUEST))

        # Assert
        assert first.changed is True
        assert first.status == RelationshipStatus.PENDING_SENT
        assert second.changed is False
        assert second.status == RelationshipStatus.PENDING_SENT

    @pytest.mark.asyncio
    async def test_accept_incoming_request(self, unit_env):
        friendships = await unit_env.get(FriendshipRepository)
        profiles = await unit_env.get(ProfileRepository)
        await profiles.upsert(make_profile("zoe"))
        await friendships.insert(
            make_friendship("zoe", ME, status=FriendshipStatus.PENDING)
        )
        use_case = await unit_env.get(ManageFriendshipUseCase)

        response = await use_case.execute(action("zoe", FriendshipAction.ACCEPT))

        assert response.changed is True
        assert response.status == RelationshipStatus.FRIENDS

    @pytest.mark.asyncio
    async def test_block_twice_reports_no_change(self, unit_env):
        use_case = await unit_env.get(ManageFriendshipUseCase)

        first = await use_case.execute(action("zoe", FriendshipAction.BLOCK))
        second = await use_case.execute(action("zoe", FriendshipAction.BLOCK))
        unblocked = await use_case.execute(action("zoe", FriendshipAction.UNBLOCK))

        assert first.changed is True
        assert second.changed is False
        assert second.status == RelationshipStatus.BLOCKED
        assert unblocked.changed is True
        assert unblocked.status == RelationshipStatus.NONE

    @pytest.mark.asyncio
    async def test_blocked_user_cannot_unblock(self, unit_env):
        friendships = await unit_env.get(FriendshipRepository)
        await friendships.insert(make_friendship("zoe", ME, FriendshipStatus.BLOCKED))
        use_case = await unit_env.get(ManageFriendshipUseCase)

        with pytest.raises(NotAuthorizedError):
            await use_case.execute(action("zoe", FriendshipAction.UNBLOCK))

    @pytest.mark.asyncio
    async def test_remove_non_friend_is_no_op(self, unit_env):
        use_case = await unit_env.get(ManageFriendshipUseCase)

        response = await use_case.execute(action("zoe", FriendshipAction.REMOVE))

        assert response.changed is False
        assert response.status == RelationshipStatus.NONE


class TestGetFriendsUseCase:
    """Tests for GetFriendsUseCase."""

    @pytest.mark.asyncio
    async def test_online_friends_first_then_by_name(self, unit_env):
        """Friends are ordered online first, then alphabetically."""
        # Arrange
        now = utcnow()
        profiles = await unit_env.get(ProfileRepository)
        friendships = await unit_env.get(FriendshipRepository)
        await profiles.upsert(make_profile(ME))
        await profiles.upsert(
            make_profile("amy", last_seen_at=now - timedelta(days=1))
        )
        await profiles.upsert(make_profile("zed", last_seen_at=now))
        await profiles.upsert(make_profile("bea"))
        await profiles.upsert(make_profile("req"))
        for friend in ("amy", "zed", "bea"):
            await friendships.insert(make_friendship(ME, friend))
        await friendships.insert(
            make_friendship("req", ME, status=FriendshipStatus.PENDING)
        )
        # Friend whose profile is gone is skipped
        await friendships.insert(make_friendship(ME, "ghost"))
        use_case = await unit_env.get(GetFriendsUseCase)

        # Act
        response = await use_case.execute(GetFriendsRequest(user_id=ME))

        # Assert
        assert [f.user_id for f in response.friends] == ["zed", "amy", "bea"]
        assert response.online_count == 1
        assert response.friends[1].last_seen == "1d ago"
        assert [r.user.user_id for r in response.incoming_requests] == ["req"]
        assert response.outgoing_requests == []


class TestDiscoverPeopleUseCase:
    """Tests for DiscoverPeopleUseCase."""

    @pytest.mark.asyncio
    async def test_search_hides_friends_and_flags_sent_requests(self, unit_env):
        # Arrange
        profiles = await unit_env.get(ProfileRepository)
        friendships = await unit_env.get(FriendshipRepository)
        await profiles.upsert(make_profile(ME, display_name="Me"))
        await profiles.upsert(make_profile("u1", display_name="Sam Friend"))
        await profiles.upsert(make_profile("u2", display_name="Sam Asked"))
        await profiles.upsert(make_profile("u3", display_name="Sam New"))
        await friendships.insert(make_friendship(ME, "u1"))
        await friendships.insert(
            make_friendship(ME, "u2", status=FriendshipStatus.PENDING)
        )
        use_case = await unit_env.get(DiscoverPeopleUseCase)

        # Act
        response = await use_case.execute(
            DiscoverPeopleRequest(user_id=ME, query="sam")
        )

        # Assert
        found = {p.user.user_id: p.request_sent for p in response.people}
        assert found == {"u2": True, "u3": False}

    @pytest.mark.asyncio
    async def test_nearby_reports_rounded_distance(self, unit_env):
        profiles = await unit_env.get(ProfileRepository)
        await profiles.upsert(
            make_profile(ME, location=Location(place_name="A", lat=52.0, lng=5.0))
        )
        await profiles.upsert(
            make_profile("near", location=Location(place_name="B", lat=52.1, lng=5.0))
        )
        use_case = await unit_env.get(DiscoverPeopleUseCase)

        response = await use_case.execute(
            DiscoverPeopleRequest(user_id=ME, nearby=True, radius_km=25)
        )

        assert [p.user.user_id for p in response.people] == ["near"]
        assert response.people[0].distance_km == pytest.approx(11.1, abs=0.1)

    def test_request_needs_query_or_nearby(self):
        with pytest.raises(ValueError):
            DiscoverPeopleRequest(user_id=ME)
