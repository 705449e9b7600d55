"""Test configuration and fixtures."""

from datetime import datetime, timedelta
from uuid import uuid4

from rally.domain.model import Activity, Friendship, Profile
from rally.domain.value import (
    ActivityId,
    ActivityType,
    ActivityVisibility,
    FriendshipStatus,
    Location,
    UserId,
)
from rally.util.time import utcnow


def make_profile(
    user_id: str,
    display_name: str | None = None,
    location: Location | None = None,
    last_seen_at: datetime | None = None,
    avatar_url: str | None = None,
) -> Profile:
    """Build a profile for seeding repositories."""
    now = utcnow()
    return Profile(
        id=UserId(user_id),
        display_name=display_name or user_id.title(),
        avatar_url=avatar_url,
        location=location,
        last_seen_at=last_seen_at,
        created_at=now,
        updated_at=now,
    )


def make_activity(
    creator_id: str,
    title: str = "Morning run",
    starts_in: timedelta = timedelta(days=1),
    max_participants: int = 10,
    visibility: ActivityVisibility = ActivityVisibility.FRIENDS,
    activity_type: ActivityType = ActivityType.RUNNING,
) -> Activity:
    """Build an activity starting ``starts_in`` from now."""
    now = utcnow()
    return Activity(
        id=ActivityId(uuid4()),
        creator_id=UserId(creator_id),
        title=title,
        starts_at=now + starts_in,
        max_participants=max_participants,
        visibility=visibility,
        activity_type=activity_type,
        created_at=now,
        updated_at=now,
    )


def make_friendship(
    requester: str,
    addressee: str,
    status: FriendshipStatus = FriendshipStatus.ACCEPTED,
) -> Friendship:
    """Build an edge between two users, accepted unless told otherwise."""
    edge = Friendship.request(UserId(requester), UserId(addressee))
    if status == FriendshipStatus.PENDING:
        return edge
    return edge.evolve(status=status)
