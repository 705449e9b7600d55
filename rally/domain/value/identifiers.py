"""Strongly typed identifiers for Rally domain entities.

User ids are opaque strings issued by the auth provider; everything we
create ourselves is keyed by UUID.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", str)
ActivityId = NewType("ActivityId", UUID)
InvitationId = NewType("InvitationId", UUID)
NotificationId = NewType("NotificationId", UUID)
