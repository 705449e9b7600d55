"""Activity invitation entity.

Invitations are directed from the organizer to one friend for one
activity.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from rally.domain.model.common import DomainModel
from rally.domain.value import ActivityId, InvitationId, InvitationStatus, UserId
from rally.util.time import utcnow


class ActivityInvitation(DomainModel):
    """Invitation to join an activity.

    Business rules:
    - One invitation per (activity, invited user)
    - Only the addressee accepts or declines; both are terminal and stamp
      ``responded_at``
    - Only the inviter cancels, and only while pending
    - Accepting also creates the participation row
    """

    id: InvitationId
    activity_id: ActivityId
    invited_user_id: UserId
    invited_by: UserId
    status: InvitationStatus = InvitationStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow)
    responded_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING
