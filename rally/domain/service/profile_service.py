"""Profile domain service."""

from collections.abc import Collection
from datetime import timedelta
from typing import Any

import logfire

from rally.config import FriendSettings, StorageSettings
from rally.domain.error import NotFoundError, ValidationError
from rally.domain.model.profile import Profile
from rally.domain.repository import ProfileRepository
from rally.domain.validation import sanitize_input, validate_profile
from rally.domain.value import Location, UserId
from rally.util.cache import TTLCache
from rally.util.geo import bounding_box, haversine_km
from rally.util.time import utcnow

from .base import Service

AVATAR_CONTENT_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}

# Checked in order against the provider's user metadata
_NAME_KEYS = ("full_name", "name", "display_name")
_AVATAR_KEYS = ("avatar_url", "picture", "photo", "image")


class AvatarStorage:
    """File storage interface for avatar images."""

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store a file, replacing any file at the same path.

        Args:
            path: Object path inside the avatar bucket
            content: File bytes
            content_type: MIME type

        Returns:
            The stored object path
        """
        raise NotImplementedError

    async def create_signed_url(self, path: str, expires_in: int) -> str:
        """Issue a time-limited URL for a stored file.

        Args:
            path: Object path inside the avatar bucket
            expires_in: Lifetime in seconds

        Returns:
            Absolute signed URL
        """
        raise NotImplementedError


class SignedUrlCache(TTLCache[str]):
    """Signed avatar URLs keyed by storage path."""

    pass


def avatar_path(user_id: UserId, extension: str) -> str:
    """Storage path of a user's avatar; one file per user."""
    return f"{user_id}/avatar.{extension}"


class ProfileService(Service):
    """Domain service for profile operations."""

    def __init__(
        self,
        profile_repository: ProfileRepository,
        avatar_storage: AvatarStorage,
        signed_url_cache: SignedUrlCache,
        storage_settings: StorageSettings,
        friend_settings: FriendSettings,
    ) -> None:
        """Initialize profile service.

        Args:
            profile_repository: Profile repository
            avatar_storage: File storage for avatars
            signed_url_cache: Shared cache of signed avatar URLs
            storage_settings: Storage settings (bucket limits, URL lifetime)
            friend_settings: Discovery settings (search and nearby limits)
        """
        self.profile_repository = profile_repository
        self.avatar_storage = avatar_storage
        self.signed_url_cache = signed_url_cache
        self.storage_settings = storage_settings
        self.friend_settings = friend_settings

    @property
    def online_window(self) -> timedelta:
        """How recently a user must have been seen to count as online."""
        return timedelta(minutes=self.friend_settings.online_window_minutes)

    async def get_profile(self, user_id: UserId) -> Profile:
        """Get a profile by user ID.

        Raises:
            NotFoundError: If the user has no profile
        """
        profile = await self.profile_repository.find_by_id(user_id)
        if profile is None:
            raise NotFoundError("Profile", user_id)
        return profile

    async def get_profiles(self, user_ids: Collection[UserId]) -> dict[UserId, Profile]:
        """Profiles for a batch of users keyed by ID; unknown IDs are absent."""
        if not user_ids:
            return {}
        profiles = await self.profile_repository.find_by_ids(set(user_ids))
        return {profile.id: profile for profile in profiles}

    async def ensure_profile(
        self,
        user_id: UserId,
        email: str | None = None,
        user_metadata: dict[str, Any] | None = None,
    ) -> Profile:
        """Create or refresh a profile from the auth provider's user data.

        Called on every session fetch. A name from the provider wins; without
        one the existing name is kept, falling back to the email's local part
        and finally ``"User"``. A provider avatar only fills an empty avatar,
        so an uploaded one is never replaced.

        Args:
            user_id: Authenticated user
            email: Email claim, if any
            user_metadata: Provider user metadata

        Returns:
            The stored profile
        """
        with logfire.span("profile_service.ensure_profile", user_id=user_id):
            metadata = user_metadata or {}
            provider_name = next(
                (str(metadata[k]).strip() for k in _NAME_KEYS if metadata.get(k)), None
            )
            provider_avatar = next(
                (str(metadata[k]) for k in _AVATAR_KEYS if metadata.get(k)), None
            )

            existing = await self.profile_repository.find_by_id(user_id)
            fallback = (email.split("@")[0] if email else None) or "User"
            display_name = (
                sanitize_input(
                    provider_name
                    or (existing.display_name if existing else None)
                    or fallback
                )[:50]
                or "User"
            )

            now = utcnow()
            if existing is None:
                profile = Profile(
                    id=user_id,
                    display_name=display_name,
                    avatar_url=provider_avatar,
                    last_seen_at=now,
                    created_at=now,
                    updated_at=now,
                )
                logfire.info("Profile created", user_id=user_id)
            else:
                profile = existing.evolve(
                    display_name=display_name,
                    avatar_url=existing.avatar_url or provider_avatar,
                    last_seen_at=now,
                    updated_at=now,
                )

            return await self.profile_repository.upsert(profile)

    async def update_profile(
        self,
        user_id: UserId,
        display_name: str | None = None,
        location: Location | None = None,
        clear_location: bool = False,
    ) -> Profile:
        """Update the owner's display name and/or location.

        Args:
            user_id: Profile owner (the acting user)
            display_name: New display name, 2-50 characters
            location: New location
            clear_location: Remove the stored location

        Returns:
            Updated profile

        Raises:
            NotFoundError: If the user has no profile
            ValidationError: If the display name is invalid
        """
        with logfire.span("profile_service.update_profile", user_id=user_id):
            profile = await self.get_profile(user_id)
            changes: dict[str, Any] = {"updated_at": utcnow()}

            if display_name is not None:
                cleaned = sanitize_input(display_name)
                errors = validate_profile(cleaned)
                if errors:
                    raise ValidationError(errors)
                changes["display_name"] = cleaned

            if clear_location:
                changes["location"] = None
            elif location is not None:
                changes["location"] = location.model_copy(
                    update={"place_name": sanitize_input(location.place_name)}
                )

            updated = await self.profile_repository.upsert(profile.evolve(**changes))
            logfire.info("Profile updated", user_id=user_id, fields=sorted(changes))
            return updated

    async def upload_avatar(
        self, user_id: UserId, content: bytes, content_type: str
    ) -> Profile:
        """Store a new avatar image and point the profile at it.

        Raises:
            NotFoundError: If the user has no profile
            ValidationError: If the file is empty, too large or not an image
        """
        with logfire.span(
            "profile_service.upload_avatar",
            user_id=user_id,
            content_type=content_type,
            size=len(content),
        ):
            extension = AVATAR_CONTENT_TYPES.get(content_type)
            errors = []
            if extension is None:
                errors.append("Avatar must be a PNG, JPEG, WebP or GIF image")
            if not content:
                errors.append("Avatar file is empty")
            elif len(content) > self.storage_settings.max_avatar_bytes:
                errors.append("Avatar file is too large")
            if errors:
                raise ValidationError(errors)

            profile = await self.get_profile(user_id)
            path = await self.avatar_storage.upload(
                avatar_path(user_id, extension), content, content_type
            )

            updated = await self.profile_repository.upsert(
                profile.evolve(avatar_url=path, updated_at=utcnow())
            )
            logfire.info("Avatar uploaded", user_id=user_id, path=path)
            return updated

    async def resolve_avatar_url(self, profile: Profile) -> str | None:
        """Displayable avatar URL for a profile.

        Direct URLs are returned as-is; storage paths get a signed URL,
        reused from cache while it is fresh.
        """
        if not profile.avatar_is_storage_path:
            return profile.avatar_url

        path = profile.avatar_url
        hit, url = self.signed_url_cache.get(path)
        if hit:
            return url

        url = await self.avatar_storage.create_signed_url(
            path, self.storage_settings.signed_url_ttl_seconds
        )
        return self.signed_url_cache.set(path, url)

    async def touch_last_seen(self, user_id: UserId) -> None:
        """Record that the user is active now."""
        await self.profile_repository.touch_last_seen(user_id, utcnow())

    async def search(
        self, query: str, exclude_ids: Collection[UserId], limit: int | None = None
    ) -> list[Profile]:
        """Search profiles by display name.

        Queries shorter than the configured minimum return nothing.
        """
        cleaned = sanitize_input(query) or ""
        if len(cleaned) < self.friend_settings.search_min_length:
            return []
        with logfire.span("profile_service.search", query=cleaned):
            return await self.profile_repository.search_by_name(
                cleaned, exclude_ids, limit or self.friend_settings.search_limit
            )

    async def nearby(
        self,
        user_id: UserId,
        exclude_ids: Collection[UserId],
        radius_km: float | None = None,
        limit: int | None = None,
    ) -> list[tuple[Profile, float]]:
        """Profiles within ``radius_km`` of the user's own location.

        Returns:
            ``(profile, distance_km)`` pairs, nearest first; empty when the
            user has no coordinates
        """
        me = await self.get_profile(user_id)
        if me.location is None or not me.location.has_coordinates:
            return []

        radius = radius_km or self.friend_settings.nearby_radius_km
        lat, lng = me.location.lat, me.location.lng

        with logfire.span("profile_service.nearby", user_id=user_id, radius_km=radius):
            candidates = await self.profile_repository.find_within_bounds(
                *bounding_box(lat, lng, radius), exclude_ids=exclude_ids
            )

            results = []
            for profile in candidates:
                if profile.location is None or not profile.location.has_coordinates:
                    continue
                distance = haversine_km(
                    lat, lng, profile.location.lat, profile.location.lng
                )
                if distance <= radius:
                    results.append((profile, distance))

            results.sort(key=lambda pair: pair[1])
            return results[: limit or self.friend_settings.nearby_limit]
