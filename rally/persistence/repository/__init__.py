"""PostgreSQL repository implementations."""

from rally.persistence.repository.activity import (
    PostgresActivityRepository,
    PostgresParticipationRepository,
)
from rally.persistence.repository.friendship import PostgresFriendshipRepository
from rally.persistence.repository.invitation import PostgresInvitationRepository
from rally.persistence.repository.notification import (
    PostgresNotificationRepository,
    PostgresNotificationSink,
)
from rally.persistence.repository.profile import PostgresProfileRepository

__all__ = [
    "PostgresProfileRepository",
    "PostgresFriendshipRepository",
    "PostgresActivityRepository",
    "PostgresParticipationRepository",
    "PostgresInvitationRepository",
    "PostgresNotificationRepository",
    "PostgresNotificationSink",
]
