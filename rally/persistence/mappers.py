"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.

Locations are stored as three columns (label, lat, lng) and become a single
``Location`` value here; no other layer sees the column layout.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from rally.domain.model import (
    Activity,
    ActivityInvitation,
    Friendship,
    Notification,
    Participation,
    Profile,
)
from rally.domain.value import (
    ActivityId,
    ActivityStatus,
    ActivityType,
    ActivityVisibility,
    FriendshipStatus,
    InvitationId,
    InvitationStatus,
    Location,
    NotificationId,
    NotificationType,
    ParticipationStatus,
    UserId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_location(
    name: Optional[str], lat: Optional[float], lng: Optional[float]
) -> Optional[Location]:
    """Build a location from its stored columns.

    A blank label means no location. A half-populated coordinate pair is
    dropped rather than rejected, so legacy rows still load.

    Args:
        name: Stored place label
        lat: Stored latitude
        lng: Stored longitude

    Returns:
        Location, or None when no label is stored
    """
    if not name or not name.strip():
        return None
    if lat is None or lng is None:
        return Location(place_name=name)
    return Location(place_name=name, lat=lat, lng=lng)


def location_to_columns(
    location: Optional[Location], prefix: str = "location"
) -> Dict[str, Any]:
    """Flatten a location into its stored columns."""
    if location is None:
        return {prefix: None, f"{prefix}_lat": None, f"{prefix}_lng": None}
    return {
        prefix: location.place_name,
        f"{prefix}_lat": location.lat,
        f"{prefix}_lng": location.lng,
    }


def row_to_profile(row: Dict[str, Any]) -> Profile:
    """Convert database row to Profile domain model.

    Args:
        row: Database row as dict

    Returns:
        Profile domain model
    """
    return Profile(
        id=UserId(row["id"]),
        display_name=row["display_name"],
        avatar_url=row.get("avatar_url"),
        location=row_to_location(
            row.get("location"), row.get("location_lat"), row.get("location_lng")
        ),
        last_seen_at=row.get("last_seen_at"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    """Convert Profile domain model to database dict.

    Args:
        profile: Profile domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return {
        "id": profile.id,
        "display_name": profile.display_name,
        "avatar_url": profile.avatar_url,
        **location_to_columns(profile.location),
        "last_seen_at": profile.last_seen_at,
        "created_at": profile.created_at,
        "updated_at": profile.updated_at,
    }


def row_to_friendship(row: Dict[str, Any]) -> Friendship:
    """Convert database row to Friendship domain model."""
    return Friendship(
        user_a=UserId(row["user_a"]),
        user_b=UserId(row["user_b"]),
        status=FriendshipStatus(row["status"]),
        requested_by=UserId(row["requested_by"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def friendship_to_dict(friendship: Friendship) -> Dict[str, Any]:
    """Convert Friendship domain model to database dict."""
    return {
        "user_a": friendship.user_a,
        "user_b": friendship.user_b,
        "status": friendship.status.value,
        "requested_by": friendship.requested_by,
        "created_at": friendship.created_at,
        "updated_at": friendship.updated_at,
    }


def row_to_activity(row: Dict[str, Any]) -> Activity:
    """Convert database row to Activity domain model.

    Args:
        row: Database row as dict

    Returns:
        Activity domain model
    """
    return Activity(
        id=ActivityId(_uuid(row["id"])),
        creator_id=UserId(row["creator_id"]),
        title=row["title"],
        description=row.get("description"),
        starts_at=row["date_time"],
        location=row_to_location(
            row.get("location"), row.get("location_lat"), row.get("location_lng")
        ),
        visibility=ActivityVisibility(row["visibility"]),
        activity_type=ActivityType(row["activity_type"]),
        max_participants=row["max_participants"],
        distance=row.get("distance"),
        duration=row.get("duration"),
        status=ActivityStatus(row["status"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def activity_to_dict(activity: Activity) -> Dict[str, Any]:
    """Convert Activity domain model to database dict.

    Args:
        activity: Activity domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return {
        "id": activity.id,
        "creator_id": activity.creator_id,
        "title": activity.title,
        "description": activity.description,
        "date_time": activity.starts_at,
        **location_to_columns(activity.location),
        "visibility": activity.visibility.value,
        "activity_type": activity.activity_type.value,
        "max_participants": activity.max_participants,
        "distance": activity.distance,
        "duration": activity.duration,
        "status": activity.status.value,
        "created_at": activity.created_at,
        "updated_at": activity.updated_at,
    }


def row_to_participation(row: Dict[str, Any]) -> Participation:
    """Convert database row to Participation domain model."""
    return Participation(
        activity_id=ActivityId(_uuid(row["activity_id"])),
        user_id=UserId(row["user_id"]),
        status=ParticipationStatus(row["status"]),
        joined_at=row["joined_at"],
    )


def participation_to_dict(participation: Participation) -> Dict[str, Any]:
    """Convert Participation domain model to database dict."""
    return {
        "activity_id": participation.activity_id,
        "user_id": participation.user_id,
        "status": participation.status.value,
        "joined_at": participation.joined_at,
    }


def row_to_invitation(row: Dict[str, Any]) -> ActivityInvitation:
    """Convert database row to ActivityInvitation domain model."""
    return ActivityInvitation(
        id=InvitationId(_uuid(row["id"])),
        activity_id=ActivityId(_uuid(row["activity_id"])),
        invited_user_id=UserId(row["invited_user_id"]),
        invited_by=UserId(row["invited_by"]),
        status=InvitationStatus(row["status"]),
        created_at=row["created_at"],
        responded_at=row.get("responded_at"),
    )


def invitation_to_dict(invitation: ActivityInvitation) -> Dict[str, Any]:
    """Convert ActivityInvitation domain model to database dict."""
    return {
        "id": invitation.id,
        "activity_id": invitation.activity_id,
        "invited_user_id": invitation.invited_user_id,
        "invited_by": invitation.invited_by,
        "status": invitation.status.value,
        "created_at": invitation.created_at,
        "responded_at": invitation.responded_at,
    }


def row_to_notification(row: Dict[str, Any]) -> Notification:
    """Convert database row to Notification domain model."""
    return Notification(
        id=NotificationId(_uuid(row["id"])),
        user_id=UserId(row["user_id"]),
        type=NotificationType(row["type"]),
        title=row["title"],
        message=row["message"],
        metadata=row.get("metadata") or {},
        read=row["read"],
        created_at=row["created_at"],
    )


def notification_to_dict(notification: Notification) -> Dict[str, Any]:
    """Convert Notification domain model to database dict."""
    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": notification.type.value,
        "title": notification.title,
        "message": notification.message,
        "metadata": notification.metadata,
        "read": notification.read,
        "created_at": notification.created_at,
    }
