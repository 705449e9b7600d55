"""Activity and participation entities.

An activity is a single scheduled event created by an organizer. It is
never physically deleted: cancelling moves it to ``cancelled``.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from rally.domain.model.common import DomainModel
from rally.domain.value import (
    ActivityId,
    ActivityStatus,
    ActivityType,
    ActivityVisibility,
    Location,
    ParticipationStatus,
    UserId,
)
from rally.util.time import ensure_utc, utcnow


class Activity(DomainModel):
    """Scheduled sports activity.

    Business rules:
    - Only the organizer (``creator_id``) edits, cancels or transfers it
    - The organizer is implicitly a participant and never has a
      participation row
    - Capacity counts participation rows only
    """

    id: ActivityId
    creator_id: UserId
    title: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    starts_at: datetime
    location: Optional[Location] = None
    visibility: ActivityVisibility = ActivityVisibility.FRIENDS
    activity_type: ActivityType = ActivityType.OTHER
    max_participants: int = Field(ge=1)
    distance: Optional[str] = None
    duration: Optional[str] = None
    status: ActivityStatus = ActivityStatus.ACTIVE
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_cancelled(self) -> bool:
        return self.status == ActivityStatus.CANCELLED

    def is_upcoming(self, now: datetime) -> bool:
        """Whether the activity has not started yet."""
        return ensure_utc(self.starts_at) > ensure_utc(now)

    def spots_left(self, participant_count: int) -> int:
        """Remaining capacity, never negative."""
        return max(self.max_participants - participant_count, 0)


class Participation(DomainModel):
    """A user's membership in an activity.

    Unique per (activity, user); duplicate joins are no-ops.
    """

    activity_id: ActivityId
    user_id: UserId
    status: ParticipationStatus = ParticipationStatus.JOINED
    joined_at: datetime = Field(default_factory=utcnow)
