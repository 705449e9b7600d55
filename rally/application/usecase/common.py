"""Response items shared by several use cases.

Profiles and activities are enriched on the way out: initials, resolved
avatar URLs and online state for people; counts, spots left and the
viewer's join eligibility for activities.
"""

from collections.abc import Iterable
from datetime import datetime

import logfire
from pydantic import BaseModel

from rally.domain.model import Activity, Profile
from rally.domain.service import ActivityService, ProfileService
from rally.domain.validation import can_join, can_leave
from rally.domain.value import Location, UserId
from rally.util.time import format_time_ago, utcnow


class PersonItem(BaseModel):
    """A user as shown in lists, cards and activity rosters."""

    user_id: str
    display_name: str
    initials: str
    avatar_url: str | None
    has_avatar: bool
    location: Location | None = None
    is_online: bool
    last_seen: str


class ActivityItem(BaseModel):
    """An activity with participants and the viewer's options."""

    activity_id: str
    title: str
    description: str | None
    starts_at: datetime
    location: Location | None
    visibility: str
    activity_type: str
    max_participants: int
    distance: str | None
    duration: str | None
    status: str
    creator: PersonItem | None
    participants: list[PersonItem]
    participant_count: int
    spots_left: int
    is_upcoming: bool
    is_organizer: bool
    is_participant: bool
    can_join: bool
    can_leave: bool
    join_blockers: list[str]
    created_at: datetime
    updated_at: datetime


async def build_person(
    profile_service: ProfileService, profile: Profile, now: datetime | None = None
) -> PersonItem:
    """Enrich one profile for display.

    A failing signed URL request leaves the avatar empty instead of failing
    the whole response.
    """
    now = now or utcnow()
    try:
        avatar_url = await profile_service.resolve_avatar_url(profile)
    except Exception as e:
        logfire.warn(
            "Avatar URL could not be resolved", user_id=profile.id, error=str(e)
        )
        avatar_url = None

    return PersonItem(
        user_id=profile.id,
        display_name=profile.display_name,
        initials=profile.initials(),
        avatar_url=avatar_url,
        has_avatar=profile.has_avatar,
        location=profile.location,
        is_online=profile.is_online(now, profile_service.online_window),
        last_seen=format_time_ago(profile.last_seen_at, now),
    )


async def build_people(
    profile_service: ProfileService, profiles: Iterable[Profile]
) -> list[PersonItem]:
    """Enrich profiles for display, keeping their order."""
    now = utcnow()
    return [await build_person(profile_service, profile, now) for profile in profiles]


async def build_activity_items(
    activities: list[Activity],
    viewer_id: UserId | None,
    activity_service: ActivityService,
    profile_service: ProfileService,
) -> list[ActivityItem]:
    """Enrich activities with creators, participants and eligibility.

    Participations and profiles are loaded in one batch each for the whole
    list.

    Args:
        activities: Activities to enrich, in display order
        viewer_id: The requesting user
        activity_service: Activity domain service
        profile_service: Profile domain service

    Returns:
        One item per activity, same order
    """
    if not activities:
        return []

    now = utcnow()
    participations = await activity_service.participants_by_activity(
        [activity.id for activity in activities]
    )

    user_ids: set[UserId] = {activity.creator_id for activity in activities}
    for rows in participations.values():
        user_ids.update(row.user_id for row in rows)
    profiles = await profile_service.get_profiles(user_ids)

    people: dict[UserId, PersonItem] = {}
    for user_id, profile in profiles.items():
        people[user_id] = await build_person(profile_service, profile, now)

    items = []
    for activity in activities:
        rows = participations.get(activity.id, [])
        participant_ids = {row.user_id for row in rows}
        join = can_join(activity, participant_ids, viewer_id, now)
        leave = can_leave(activity, participant_ids, viewer_id)

        items.append(
            ActivityItem(
                activity_id=str(activity.id),
                title=activity.title,
                description=activity.description,
                starts_at=activity.starts_at,
                location=activity.location,
                visibility=activity.visibility.value,
                activity_type=activity.activity_type.value,
                max_participants=activity.max_participants,
                distance=activity.distance,
                duration=activity.duration,
                status=activity.status.value,
                creator=people.get(activity.creator_id),
                participants=[
                    people[row.user_id] for row in rows if row.user_id in people
                ],
                participant_count=len(rows),
                spots_left=activity.spots_left(len(rows)),
                is_upcoming=activity.is_upcoming(now),
                is_organizer=viewer_id == activity.creator_id,
                is_participant=viewer_id in participant_ids,
                can_join=join.allowed,
                can_leave=leave.allowed,
                join_blockers=join.reasons,
                created_at=activity.created_at,
                updated_at=activity.updated_at,
            )
        )
    return items
