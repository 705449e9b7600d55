"""Pure validation and eligibility rules.

Nothing here touches storage: callers pass in the activity, its current
participant ids and the reference time.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime

from rally.config import ActivitySettings
from rally.domain.error import ValidationError
from rally.domain.model.activity import Activity
from rally.domain.value import (
    ActivityId,
    ActivityType,
    ActivityVisibility,
    UserId,
    VisibilityChoice,
)
from rally.util.time import ensure_utc

NOT_AUTHENTICATED_JOIN = "You must be logged in to join activities"
NOT_AUTHENTICATED = "You must be logged in"
IS_CREATOR_JOIN = "You cannot join your own activity"
ALREADY_JOINED = "You are already joined to this activity"
ACTIVITY_FULL = "This activity is full"
ACTIVITY_PASSED = "This activity has already passed"
ACTIVITY_CANCELLED = "This activity has been cancelled"
IS_CREATOR_LEAVE = "Activity creators cannot leave their own activity"
NOT_JOINED = "You are not joined to this activity"

SANITIZE_MAX_LENGTH = 1000

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_VISIBILITY_MAP = {
    VisibilityChoice.ALL_FRIENDS: ActivityVisibility.FRIENDS,
    VisibilityChoice.SPECIFIC_FRIENDS: ActivityVisibility.PRIVATE,
    VisibilityChoice.PUBLIC: ActivityVisibility.PUBLIC,
}


@dataclass(frozen=True)
class Eligibility:
    """Outcome of a join/leave check with every failing reason."""

    allowed: bool
    reasons: list[str] = field(default_factory=list)


def sanitize_input(value: str | None) -> str | None:
    """Trim, strip angle brackets and cap free text at 1000 characters."""
    if value is None:
        return None
    return value.strip().replace("<", "").replace(">", "")[:SANITIZE_MAX_LENGTH]


def map_visibility(choice: VisibilityChoice | str) -> ActivityVisibility:
    """Map the audience chosen at creation to the stored visibility.

    Raises:
        ValidationError: For anything outside the three known choices
    """
    try:
        return _VISIBILITY_MAP[VisibilityChoice(choice)]
    except (ValueError, KeyError):
        raise ValidationError(f"Unknown visibility: {choice!r}")


def validate_activity(
    *,
    title: str | None,
    starts_at: datetime | None,
    max_participants: int | None,
    now: datetime,
    limits: ActivitySettings,
    description: str | None = None,
    location_name: str | None = None,
    activity_type: str | None = None,
    require_future_start: bool = True,
) -> list[str]:
    """Check activity fields and collect every problem.

    Args:
        require_future_start: Reject start times not after ``now``; edits
            that keep the original start time skip this

    Returns:
        Error messages; empty when the draft is valid
    """
    errors: list[str] = []

    stripped_title = (title or "").strip()
    if not stripped_title:
        errors.append("Title is required")
    elif len(stripped_title) < limits.title_min_length:
        errors.append(f"Title must be at least {limits.title_min_length} characters")
    elif len(stripped_title) > limits.title_max_length:
        errors.append(f"Title must be less than {limits.title_max_length} characters")

    if starts_at is None:
        errors.append("Date is required")
    elif require_future_start and ensure_utc(starts_at) <= ensure_utc(now):
        errors.append("Date must be in the future")

    if not max_participants:
        errors.append("Maximum participants is required")
    elif max_participants < limits.min_participants:
        errors.append(f"Must allow at least {limits.min_participants} participants")
    elif max_participants > limits.max_participants:
        errors.append(f"Maximum {limits.max_participants} participants allowed")

    if location_name and len(location_name) > limits.location_max_length:
        errors.append(
            f"Location must be less than {limits.location_max_length} characters"
        )

    if description and len(description) > limits.description_max_length:
        errors.append(
            f"Description must be less than {limits.description_max_length} characters"
        )

    if activity_type is not None and activity_type not in {t.value for t in ActivityType}:
        errors.append("Invalid activity type")

    return errors


def validate_profile(display_name: str | None, email: str | None = None) -> list[str]:
    """Check profile fields and collect every problem."""
    errors: list[str] = []

    name = (display_name or "").strip()
    if not name:
        errors.append("Display name is required")
    elif len(name) < 2:
        errors.append("Display name must be at least 2 characters")
    elif len(name) > 50:
        errors.append("Display name must be less than 50 characters")

    if email and not _EMAIL_RE.match(email):
        errors.append("Please enter a valid email address")

    return errors


def is_visible(
    activity: Activity,
    viewer_id: UserId,
    participant_ids: set[UserId],
    friend_ids: set[UserId],
    invited_activity_ids: set[ActivityId],
) -> bool:
    """Decide whether ``viewer_id`` may see ``activity`` at all.

    Public activities are open to everyone. The organizer, participants and
    invitees always see it; accepted friends of the organizer see
    friends-only activities.
    """
    if activity.visibility == ActivityVisibility.PUBLIC:
        return True
    if viewer_id == activity.creator_id or viewer_id in participant_ids:
        return True
    if activity.id in invited_activity_ids:
        return True
    if activity.visibility == ActivityVisibility.FRIENDS:
        return activity.creator_id in friend_ids
    return False


def can_join(
    activity: Activity,
    participant_ids: set[UserId],
    user_id: UserId | None,
    now: datetime,
) -> Eligibility:
    """Decide whether ``user_id`` may join ``activity``.

    All failing conditions are collected rather than stopping at the first.
    """
    reasons: list[str] = []

    if user_id is None:
        reasons.append(NOT_AUTHENTICATED_JOIN)
    else:
        if user_id == activity.creator_id:
            reasons.append(IS_CREATOR_JOIN)
        if user_id in participant_ids:
            reasons.append(ALREADY_JOINED)

    if len(participant_ids) >= activity.max_participants:
        reasons.append(ACTIVITY_FULL)
    if not activity.is_upcoming(now):
        reasons.append(ACTIVITY_PASSED)
    if activity.is_cancelled:
        reasons.append(ACTIVITY_CANCELLED)

    return Eligibility(allowed=not reasons, reasons=reasons)


def can_leave(
    activity: Activity,
    participant_ids: set[UserId],
    user_id: UserId | None,
) -> Eligibility:
    """Decide whether ``user_id`` may leave ``activity``.

    The organizer cannot leave; they cancel or transfer ownership instead.
    """
    if user_id is None:
        return Eligibility(allowed=False, reasons=[NOT_AUTHENTICATED])

    reasons: list[str] = []
    if user_id == activity.creator_id:
        reasons.append(IS_CREATOR_LEAVE)
    if user_id not in participant_ids:
        reasons.append(NOT_JOINED)

    return Eligibility(allowed=not reasons, reasons=reasons)
