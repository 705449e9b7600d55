"""Profile entity.

One profile per authenticated user, keyed by the auth provider's user id.
"""

from datetime import datetime, timedelta
from typing import Optional

from pydantic import Field

from rally.domain.model.common import DomainModel
from rally.domain.value import Location, UserId
from rally.util.time import ensure_utc, utcnow


class Profile(DomainModel):
    """User profile.

    ``avatar_url`` is either a direct URL (e.g. from the OAuth provider) or a
    storage path such as ``"<user id>/avatar.png"`` that has to be resolved
    to a signed URL before it is shown.

    Business rules:
    - Only the owning user mutates their profile
    - Display name is 2-50 characters
    """

    id: UserId
    display_name: str = Field(min_length=1, max_length=100)
    avatar_url: Optional[str] = None
    location: Optional[Location] = None
    last_seen_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def has_avatar(self) -> bool:
        """Whether an avatar reference is set."""
        return bool(self.avatar_url)

    @property
    def avatar_is_storage_path(self) -> bool:
        """Whether the avatar needs a signed URL from file storage."""
        return bool(self.avatar_url) and not self.avatar_url.startswith(
            ("http://", "https://")
        )

    def initials(self) -> str:
        """Up to two uppercase initials from the display name."""
        letters = "".join(part[0] for part in self.display_name.split() if part)
        return letters.upper()[:2] or "U"

    def is_online(self, now: datetime, window: timedelta) -> bool:
        """Whether the user was seen within ``window`` of ``now``."""
        if self.last_seen_at is None:
            return False
        return ensure_utc(now) - ensure_utc(self.last_seen_at) <= window
