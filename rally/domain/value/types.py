"""Domain value objects for Rally.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class ValueObject(BaseModel):
    """Base class for value objects: immutable, compared by value."""

    model_config = ConfigDict(frozen=True)


class FriendshipStatus(str, Enum):
    """Stored status of a friendship edge.

    Declined requests are deleted rather than stored, so the pair can be
    requested again later.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    BLOCKED = "blocked"


class RelationshipStatus(str, Enum):
    """Relationship between the viewer and another user, as seen by the viewer."""

    NONE = "none"
    FRIENDS = "friends"
    PENDING_SENT = "pending_sent"
    PENDING_RECEIVED = "pending_received"
    BLOCKED = "blocked"


class ActivityVisibility(str, Enum):
    """Stored audience of an activity.

    PRIVATE backs the "specific friends" choice: only invitees see it.
    """

    FRIENDS = "friends"
    PRIVATE = "private"
    PUBLIC = "public"


class VisibilityChoice(str, Enum):
    """Audience choice offered when creating an activity."""

    ALL_FRIENDS = "all-friends"
    SPECIFIC_FRIENDS = "specific-friends"
    PUBLIC = "public"


class ActivityStatus(str, Enum):
    """Lifecycle status of an activity. Activities are never deleted."""

    ACTIVE = "active"
    CANCELLED = "cancelled"


class ActivityType(str, Enum):
    """Catalogue of supported activity categories."""

    RUNNING = "running"
    CYCLING = "cycling"
    TENNIS = "tennis"
    FOOTBALL = "football"
    BASKETBALL = "basketball"
    SWIMMING = "swimming"
    HIKING = "hiking"
    YOGA = "yoga"
    GYM = "gym"
    OTHER = "other"


class ParticipationStatus(str, Enum):
    """Status of a participation row."""

    JOINED = "joined"


class InvitationStatus(str, Enum):
    """Status of an activity invitation.

    ACCEPTED and DECLINED are terminal. Cancelling a pending invitation
    deletes it.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class NotificationType(str, Enum):
    """Kinds of inbox notifications."""

    FRIEND_REQUEST = "friend_request"
    FRIEND_REQUEST_ACCEPTED = "friend_request_accepted"
    ACTIVITY_INVITATION = "activity_invitation"


class Location(ValueObject):
    """Free-text place label with optional coordinates.

    This is the one normalized shape for locations; storage rows are mapped
    into it once at the persistence boundary.
    """

    place_name: str
    lat: float | None = None
    lng: float | None = None

    @field_validator("place_name")
    @classmethod
    def validate_place_name(cls, v: str) -> str:
        """Validate the label is not blank."""
        v = v.strip()
        if not v:
            raise ValueError("Location name must not be empty")
        return v

    @field_validator("lat")
    @classmethod
    def validate_lat(cls, v: float | None) -> float | None:
        """Validate latitude range."""
        if v is not None and not -90 <= v <= 90:
            raise ValueError("Latitude must be between -90 and 90")
        return v

    @field_validator("lng")
    @classmethod
    def validate_lng(cls, v: float | None) -> float | None:
        """Validate longitude range."""
        if v is not None and not -180 <= v <= 180:
            raise ValueError("Longitude must be between -180 and 180")
        return v

    @model_validator(mode="after")
    def validate_coordinate_pair(self) -> "Location":
        """Coordinates come as a pair or not at all."""
        if (self.lat is None) != (self.lng is None):
            raise ValueError("Latitude and longitude must be provided together")
        return self

    @property
    def has_coordinates(self) -> bool:
        """Whether this location can be used for distance queries."""
        return self.lat is not None and self.lng is not None


class PlaceCandidate(ValueObject):
    """One geocoding match offered while the user types a location."""

    id: str
    place_name: str
    lat: float
    lng: float
    place_type: str | None = None

    def to_location(self) -> Location:
        """The normalized location this candidate stands for."""
        return Location(place_name=self.place_name, lat=self.lat, lng=self.lng)
