"""Repository interfaces for Rally domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from rally.domain.repository.activity import ActivityRepository, ParticipationRepository
from rally.domain.repository.friendship import FriendshipRepository
from rally.domain.repository.invitation import InvitationRepository
from rally.domain.repository.notification import NotificationRepository, NotificationSink
from rally.domain.repository.profile import ProfileRepository

__all__ = [
    "ActivityRepository",
    "FriendshipRepository",
    "InvitationRepository",
    "NotificationRepository",
    "NotificationSink",
    "ParticipationRepository",
    "ProfileRepository",
]
