"""In-memory activity and participation repositories for testing."""

from collections.abc import Collection
from datetime import datetime

from rally.domain.error import DuplicateError, NotFoundError
from rally.domain.model.activity import Activity, Participation
from rally.domain.repository.activity import (
    ActivityRepository,
    ParticipationRepository,
)
from rally.domain.value import ActivityId, ActivityVisibility, UserId
from rally.util.time import ensure_utc


class InMemoryActivityRepository(ActivityRepository):
    """In-memory implementation of ActivityRepository for testing."""

    def __init__(self) -> None:
        self._activities: dict[ActivityId, Activity] = {}

    def _sorted(self, activities: list[Activity]) -> list[Activity]:
        return sorted(activities, key=lambda a: ensure_utc(a.starts_at))

    async def find_by_id(self, activity_id: ActivityId) -> Activity | None:
        """Find an activity by ID."""
        return self._activities.get(activity_id)

    async def find_by_ids(self, activity_ids: Collection[ActivityId]) -> list[Activity]:
        """Find a batch of activities ordered by start time."""
        return self._sorted(
            [self._activities[aid] for aid in set(activity_ids) if aid in self._activities]
        )

    async def find_by_creator(
        self, creator_id: UserId, include_cancelled: bool = False
    ) -> list[Activity]:
        """Find activities organized by a user, soonest first."""
        return self._sorted(
            [
                activity
                for activity in self._activities.values()
                if activity.creator_id == creator_id
                and (include_cancelled or not activity.is_cancelled)
            ]
        )

    async def find_visible_upcoming(
        self,
        start: datetime,
        end: datetime,
        exclude_creator: UserId,
        friend_ids: Collection[UserId],
        invited_activity_ids: Collection[ActivityId],
    ) -> list[Activity]:
        """Find active activities in a time window that a viewer may see."""
        start, end = ensure_utc(start), ensure_utc(end)
        visible = []
        for activity in self._activities.values():
            if activity.is_cancelled or activity.creator_id == exclude_creator:
                continue
            if not start <= ensure_utc(activity.starts_at) <= end:
                continue
            if (
                activity.visibility == ActivityVisibility.PUBLIC
                or (
                    activity.visibility == ActivityVisibility.FRIENDS
                    and activity.creator_id in friend_ids
                )
                or activity.id in invited_activity_ids
            ):
                visible.append(activity)
        return self._sorted(visible)

    async def insert(self, activity: Activity) -> Activity:
        """Insert a new activity."""
        self._activities[activity.id] = activity
        return activity

    async def update(self, activity: Activity) -> Activity:
        """Overwrite an existing activity.

        Raises:
            NotFoundError: If the activity does not exist
        """
        if activity.id not in self._activities:
            raise NotFoundError("Activity", str(activity.id))
        self._activities[activity.id] = activity
        return activity


class InMemoryParticipationRepository(ParticipationRepository):
    """In-memory implementation of ParticipationRepository for testing."""

    def __init__(self) -> None:
        self._participations: dict[tuple[ActivityId, UserId], Participation] = {}

    async def insert(self, participation: Participation) -> Participation:
        """Insert a participation row.

        Raises:
            DuplicateError: If the user already joined the activity
        """
        key = (participation.activity_id, participation.user_id)
        if key in self._participations:
            raise DuplicateError(
                "participation", f"{participation.activity_id}:{participation.user_id}"
            )
        self._participations[key] = participation
        return participation

    async def delete(self, activity_id: ActivityId, user_id: UserId) -> bool:
        """Delete a user's participation."""
        return self._participations.pop((activity_id, user_id), None) is not None

    async def find_by_activities(
        self, activity_ids: Collection[ActivityId]
    ) -> list[Participation]:
        """Find participations for a batch of activities, by join time."""
        ids = set(activity_ids)
        matches = [p for p in self._participations.values() if p.activity_id in ids]
        matches.sort(key=lambda p: ensure_utc(p.joined_at))
        return matches

    async def find_activity_ids_for_user(self, user_id: UserId) -> list[ActivityId]:
        """Find the activities a user joined."""
        return [
            activity_id
            for (activity_id, participant), _ in self._participations.items()
            if participant == user_id
        ]
