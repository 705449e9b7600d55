"""Notification entity."""

from datetime import datetime
from typing import Any

from pydantic import Field

from rally.domain.model.common import DomainModel
from rally.domain.value import NotificationId, NotificationType, UserId
from rally.util.time import utcnow


class Notification(DomainModel):
    """Inbox message addressed to one user.

    ``metadata`` references the entities that triggered it, e.g.
    ``{"sender_id": ..., "sender_name": ...}`` for a friend request.
    """

    id: NotificationId
    user_id: UserId
    type: NotificationType
    title: str
    message: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    read: bool = False
    created_at: datetime = Field(default_factory=utcnow)
