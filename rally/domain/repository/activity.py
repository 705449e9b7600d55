"""Activity and participation repository interfaces."""

from abc import ABC, abstractmethod
from collections.abc import Collection
from datetime import datetime

from rally.domain.model.activity import Activity, Participation
from rally.domain.value import ActivityId, UserId


class ActivityRepository(ABC):
    """Repository for Activity entity.

    Defines the contract for activity persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, activity_id: ActivityId) -> Activity | None:
        """Find an activity by ID.

        Args:
            activity_id: The activity's unique identifier

        Returns:
            The activity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, activity_ids: Collection[ActivityId]) -> list[Activity]:
        """Find a batch of activities ordered by start time.

        Args:
            activity_ids: Activity IDs to look up

        Returns:
            Activities found, soonest first
        """
        pass

    @abstractmethod
    async def find_by_creator(
        self, creator_id: UserId, include_cancelled: bool = False
    ) -> list[Activity]:
        """Find activities organized by a user, soonest first.

        Args:
            creator_id: The organizer
            include_cancelled: Whether cancelled activities are included

        Returns:
            The organizer's activities
        """
        pass

    @abstractmethod
    async def find_visible_upcoming(
        self,
        start: datetime,
        end: datetime,
        exclude_creator: UserId,
        friend_ids: Collection[UserId],
        invited_activity_ids: Collection[ActivityId],
    ) -> list[Activity]:
        """Find active activities in a time window that a viewer may see.

        An activity is visible when it is public, when it is friends-only and
        organized by one of ``friend_ids``, or when its ID is in
        ``invited_activity_ids``.

        Args:
            start: Earliest start time (inclusive)
            end: Latest start time (inclusive)
            exclude_creator: The viewer; their own activities are left out
            friend_ids: The viewer's accepted friends
            invited_activity_ids: Activities the viewer was invited to

        Returns:
            Visible activities, soonest first
        """
        pass

    @abstractmethod
    async def insert(self, activity: Activity) -> Activity:
        """Insert a new activity.

        Args:
            activity: The activity to insert

        Returns:
            The inserted activity
        """
        pass

    @abstractmethod
    async def update(self, activity: Activity) -> Activity:
        """Overwrite an existing activity.

        Args:
            activity: The changed activity

        Returns:
            The stored activity

        Raises:
            NotFoundError: If the activity does not exist
        """
        pass


class ParticipationRepository(ABC):
    """Repository for Participation rows.

    Unique per (activity, user).
    """

    @abstractmethod
    async def insert(self, participation: Participation) -> Participation:
        """Insert a participation row.

        Args:
            participation: The participation to insert

        Returns:
            The inserted participation

        Raises:
            DuplicateError: If the user already joined the activity
        """
        pass

    @abstractmethod
    async def delete(self, activity_id: ActivityId, user_id: UserId) -> bool:
        """Delete a user's participation.

        Args:
            activity_id: The activity
            user_id: The participant

        Returns:
            True if a row was deleted, False if none existed
        """
        pass

    @abstractmethod
    async def find_by_activities(
        self, activity_ids: Collection[ActivityId]
    ) -> list[Participation]:
        """Find participations for a batch of activities (avoids N+1).

        Args:
            activity_ids: Activities to look up

        Returns:
            Participations ordered by join time
        """
        pass

    @abstractmethod
    async def find_activity_ids_for_user(self, user_id: UserId) -> list[ActivityId]:
        """Find the activities a user joined.

        Args:
            user_id: The participant

        Returns:
            IDs of joined activities
        """
        pass
