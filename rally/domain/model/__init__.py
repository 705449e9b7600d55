"""Domain model entities for Rally."""

from rally.domain.model.activity import Activity, Participation
from rally.domain.model.friendship import FriendGraph, Friendship, canonical_pair
from rally.domain.model.invitation import ActivityInvitation
from rally.domain.model.notification import Notification
from rally.domain.model.profile import Profile

__all__ = [
    "Activity",
    "ActivityInvitation",
    "FriendGraph",
    "Friendship",
    "Notification",
    "Participation",
    "Profile",
    "canonical_pair",
]
