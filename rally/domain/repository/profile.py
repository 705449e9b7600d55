"""Profile repository interface."""

from abc import ABC, abstractmethod
from collections.abc import Collection
from datetime import datetime

from rally.domain.model.profile import Profile
from rally.domain.value import UserId


class ProfileRepository(ABC):
    """Repository for Profile entity.

    Defines the contract for profile persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Profile | None:
        """Find a profile by user ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The profile if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, user_ids: Collection[UserId]) -> list[Profile]:
        """Find profiles for a batch of users.

        Unknown ids are skipped silently.

        Args:
            user_ids: User IDs to look up

        Returns:
            Profiles found, in no particular order
        """
        pass

    @abstractmethod
    async def search_by_name(
        self, query: str, exclude_ids: Collection[UserId], limit: int
    ) -> list[Profile]:
        """Case-insensitive substring search on display name.

        Args:
            query: Text contained in the display name
            exclude_ids: Users to leave out of the results
            limit: Maximum number of results

        Returns:
            Matching profiles ordered by display name
        """
        pass

    @abstractmethod
    async def find_within_bounds(
        self,
        min_lat: float,
        max_lat: float,
        min_lng: float,
        max_lng: float,
        exclude_ids: Collection[UserId],
    ) -> list[Profile]:
        """Find profiles whose coordinates fall inside a bounding box.

        Used as a coarse prefilter for radius searches; exact distances are
        computed by the caller.

        Args:
            min_lat: Southern bound
            max_lat: Northern bound
            min_lng: Western bound
            max_lng: Eastern bound
            exclude_ids: Users to leave out of the results

        Returns:
            Profiles with coordinates inside the box
        """
        pass

    @abstractmethod
    async def upsert(self, profile: Profile) -> Profile:
        """Insert a profile or overwrite the existing row with the same ID.

        Args:
            profile: The profile to store

        Returns:
            The stored profile
        """
        pass

    @abstractmethod
    async def touch_last_seen(self, user_id: UserId, seen_at: datetime) -> None:
        """Record user activity for online indicators.

        Args:
            user_id: The user seen
            seen_at: When the user was seen
        """
        pass
