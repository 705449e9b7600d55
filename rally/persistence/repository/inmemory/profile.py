"""In-memory profile repository for testing."""

from collections.abc import Collection
from datetime import datetime

from rally.domain.model.profile import Profile
from rally.domain.repository.profile import ProfileRepository
from rally.domain.value import UserId


class InMemoryProfileRepository(ProfileRepository):
    """In-memory implementation of ProfileRepository for testing."""

    def __init__(self) -> None:
        self._profiles: dict[UserId, Profile] = {}

    async def find_by_id(self, user_id: UserId) -> Profile | None:
        """Find a profile by user ID."""
        return self._profiles.get(user_id)

    async def find_by_ids(self, user_ids: Collection[UserId]) -> list[Profile]:
        """Find profiles for a batch of users."""
        return [self._profiles[uid] for uid in set(user_ids) if uid in self._profiles]

    async def search_by_name(
        self, query: str, exclude_ids: Collection[UserId], limit: int
    ) -> list[Profile]:
        """Case-insensitive substring search on display name."""
        needle = query.lower()
        matches = [
            profile
            for profile in self._profiles.values()
            if needle in profile.display_name.lower() and profile.id not in exclude_ids
        ]
        matches.sort(key=lambda p: p.display_name.lower())
        return matches[:limit]

    async def find_within_bounds(
        self,
        min_lat: float,
        max_lat: float,
        min_lng: float,
        max_lng: float,
        exclude_ids: Collection[UserId],
    ) -> list[Profile]:
        """Find profiles whose coordinates fall inside a bounding box."""
        matches = []
        for profile in self._profiles.values():
            if profile.id in exclude_ids:
                continue
            location = profile.location
            if location is None or not location.has_coordinates:
                continue
            if min_lat <= location.lat <= max_lat and min_lng <= location.lng <= max_lng:
                matches.append(profile)
        return matches

    async def upsert(self, profile: Profile) -> Profile:
        """Insert or overwrite a profile, keeping the original created_at."""
        existing = self._profiles.get(profile.id)
        if existing is not None:
            profile = profile.evolve(created_at=existing.created_at)
        self._profiles[profile.id] = profile
        return profile

    async def touch_last_seen(self, user_id: UserId, seen_at: datetime) -> None:
        """Record user activity for online indicators."""
        profile = self._profiles.get(user_id)
        if profile is not None:
            self._profiles[user_id] = profile.evolve(last_seen_at=seen_at)
