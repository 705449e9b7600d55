"""Domain value objects for Rally."""

from rally.domain.value.identifiers import (
    ActivityId,
    InvitationId,
    NotificationId,
    UserId,
)
from rally.domain.value.types import (
    ActivityStatus,
    ActivityType,
    ActivityVisibility,
    FriendshipStatus,
    InvitationStatus,
    Location,
    NotificationType,
    PlaceCandidate,
    ParticipationStatus,
    RelationshipStatus,
    VisibilityChoice,
)

__all__ = [
    # Identifiers
    "UserId",
    "ActivityId",
    "InvitationId",
    "NotificationId",
    # Types
    "ActivityStatus",
    "ActivityType",
    "ActivityVisibility",
    "FriendshipStatus",
    "InvitationStatus",
    "Location",
    "NotificationType",
    "PlaceCandidate",
    "ParticipationStatus",
    "RelationshipStatus",
    "VisibilityChoice",
]
