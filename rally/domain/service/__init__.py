"""Domain services."""

from .activity_service import ActivityService
from .base import Service
from .friendship_service import FriendshipService
from .invitation_service import InvitationService
from .jwt_service import JWTService
from .notification_service import NotificationService, drain_notifications
from .place_service import GeocodingClient, PlaceSearchResult, PlaceService
from .profile_service import AvatarStorage, ProfileService, SignedUrlCache

__all__ = [
    "ActivityService",
    "AvatarStorage",
    "FriendshipService",
    "GeocodingClient",
    "InvitationService",
    "JWTService",
    "NotificationService",
    "PlaceSearchResult",
    "PlaceService",
    "ProfileService",
    "Service",
    "SignedUrlCache",
    "drain_notifications",
]
