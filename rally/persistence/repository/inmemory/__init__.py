"""In-memory repository implementations for testing."""

from .activity import InMemoryActivityRepository, InMemoryParticipationRepository
from .friendship import InMemoryFriendshipRepository
from .invitation import InMemoryInvitationRepository
from .notification import InMemoryNotificationRepository, InMemoryNotificationSink
from .profile import InMemoryProfileRepository

__all__ = [
    "InMemoryActivityRepository",
    "InMemoryFriendshipRepository",
    "InMemoryInvitationRepository",
    "InMemoryNotificationRepository",
    "InMemoryNotificationSink",
    "InMemoryParticipationRepository",
    "InMemoryProfileRepository",
]
