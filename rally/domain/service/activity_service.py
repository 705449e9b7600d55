"""Activity domain service.

Covers the organizer's lifecycle operations (create, edit, cancel,
transfer) and participants joining and leaving.
"""

from collections import defaultdict
from collections.abc import Collection
from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

import logfire

from rally.config import ActivitySettings
from rally.domain.error import (
    BusinessRuleViolationError,
    DuplicateError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from rally.domain.model.activity import Activity, Participation
from rally.domain.repository import ActivityRepository, ParticipationRepository
from rally.domain.validation import (
    ALREADY_JOINED,
    IS_CREATOR_LEAVE,
    Eligibility,
    can_join,
    is_visible,
    map_visibility,
    sanitize_input,
    validate_activity,
)
from rally.domain.value import (
    ActivityId,
    ActivityStatus,
    ActivityType,
    Location,
    UserId,
    VisibilityChoice,
)
from rally.util.time import utcnow

from .base import Service

# Fields the organizer may change after creation
EDITABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "starts_at",
        "location",
        "activity_type",
        "max_participants",
        "distance",
        "duration",
    }
)


class ActivityService(Service):
    """Domain service for activity operations."""

    def __init__(
        self,
        activity_repository: ActivityRepository,
        participation_repository: ParticipationRepository,
        settings: ActivitySettings,
    ) -> None:
        """Initialize activity service.

        Args:
            activity_repository: Activity repository
            participation_repository: Participation repository
            settings: Activity validation and feed settings
        """
        self.activity_repository = activity_repository
        self.participation_repository = participation_repository
        self.settings = settings

    async def get_activity(self, activity_id: ActivityId) -> Activity:
        """Get an activity by ID.

        Raises:
            NotFoundError: If the activity does not exist
        """
        activity = await self.activity_repository.find_by_id(activity_id)
        if activity is None:
            raise NotFoundError("Activity", str(activity_id))
        return activity

    async def get_activities(
        self, activity_ids: Collection[ActivityId]
    ) -> dict[ActivityId, Activity]:
        """Load several activities at once; missing IDs are left out."""
        if not activity_ids:
            return {}
        activities = await self.activity_repository.find_by_ids(activity_ids)
        return {activity.id: activity for activity in activities}

    async def _get_owned(self, activity_id: ActivityId, user_id: UserId) -> Activity:
        activity = await self.get_activity(activity_id)
        if activity.creator_id != user_id:
            logfire.warn(
                "Non-organizer tried to modify activity",
                activity_id=str(activity_id),
                user_id=user_id,
            )
            raise NotAuthorizedError("activity", str(activity_id), user_id)
        return activity

    def _validate(
        self, activity: Activity, now: datetime, require_future_start: bool
    ) -> None:
        errors = validate_activity(
            title=activity.title,
            starts_at=activity.starts_at,
            max_participants=activity.max_participants,
            now=now,
            limits=self.settings,
            description=activity.description,
            location_name=activity.location.place_name if activity.location else None,
            activity_type=activity.activity_type.value,
            require_future_start=require_future_start,
        )
        if errors:
            raise ValidationError(errors)

    async def create_activity(
        self,
        creator_id: UserId,
        title: str,
        starts_at: datetime,
        max_participants: int,
        visibility: VisibilityChoice | str,
        activity_type: ActivityType | str = ActivityType.OTHER,
        description: str | None = None,
        location: Location | None = None,
        distance: str | None = None,
        duration: str | None = None,
    ) -> Activity:
        """Create a new activity organized by ``creator_id``.

        Args:
            creator_id: Organizer
            title: Activity title
            starts_at: Start time, must be in the future
            max_participants: Capacity, excluding the organizer
            visibility: Audience choice; mapped to the stored visibility
            activity_type: Category from the fixed catalogue
            description: Optional description
            location: Optional place
            distance: Optional free-form distance
            duration: Optional free-form duration

        Returns:
            Created activity

        Raises:
            ValidationError: With every failing field if the input is invalid
        """
        with logfire.span(
            "activity_service.create_activity", creator_id=creator_id, title=title
        ):
            now = utcnow()
            errors = validate_activity(
                title=title,
                starts_at=starts_at,
                max_participants=max_participants,
                now=now,
                limits=self.settings,
                description=description,
                location_name=location.place_name if location else None,
                activity_type=getattr(activity_type, "value", activity_type),
            )
            if errors:
                logfire.warn(
                    "Activity validation failed", creator_id=creator_id, errors=errors
                )
                raise ValidationError(errors)

            activity = Activity(
                id=ActivityId(uuid4()),
                creator_id=creator_id,
                title=sanitize_input(title),
                description=sanitize_input(description) or None,
                starts_at=starts_at,
                location=location,
                visibility=map_visibility(visibility),
                activity_type=ActivityType(activity_type),
                max_participants=max_participants,
                distance=sanitize_input(distance) or None,
                duration=sanitize_input(duration) or None,
                status=ActivityStatus.ACTIVE,
                created_at=now,
                updated_at=now,
            )

            saved = await self.activity_repository.insert(activity)
            logfire.info(
                "Activity created",
                activity_id=str(saved.id),
                creator_id=creator_id,
                visibility=saved.visibility.value,
            )
            return saved

    async def update_activity(
        self, activity_id: ActivityId, user_id: UserId, changes: dict[str, Any]
    ) -> Activity:
        """Edit an activity's details.

        Args:
            activity_id: Activity to edit
            user_id: Acting user (must be the organizer)
            changes: Field name to new value; only editable fields are allowed

        Returns:
            Updated activity

        Raises:
            NotFoundError: If the activity does not exist
            NotAuthorizedError: If the user is not the organizer
            InvalidTransitionError: If the activity is cancelled
            ValidationError: If the edited activity would be invalid
        """
        with logfire.span(
            "activity_service.update_activity",
            activity_id=str(activity_id),
            user_id=user_id,
            fields=sorted(changes),
        ):
            unknown = set(changes) - EDITABLE_FIELDS
            if unknown:
                raise ValidationError(
                    [f"Field cannot be edited: {name}" for name in sorted(unknown)]
                )

            activity = await self._get_owned(activity_id, user_id)
            if activity.is_cancelled:
                raise InvalidTransitionError(
                    "activity", str(activity_id), activity.status.value, "edited"
                )

            cleaned = {
                name: sanitize_input(value) if isinstance(value, str) else value
                for name, value in changes.items()
            }
            try:
                updated = activity.evolve(**cleaned, updated_at=utcnow())
            except ValueError as e:
                raise ValidationError(str(e))
            self._validate(
                updated, utcnow(), require_future_start="starts_at" in changes
            )

            if "max_participants" in changes:
                participants = await self.participant_ids(activity_id)
                if len(participants) > updated.max_participants:
                    raise ValidationError(
                        f"Capacity cannot be lower than the {len(participants)} "
                        "people who already joined"
                    )

            saved = await self.activity_repository.update(updated)
            logfire.info("Activity updated", activity_id=str(activity_id))
            return saved

    async def cancel_activity(self, activity_id: ActivityId, user_id: UserId) -> Activity:
        """Cancel an activity. The row is kept with status ``cancelled``.

        Raises:
            NotFoundError: If the activity does not exist
            NotAuthorizedError: If the user is not the organizer
            InvalidTransitionError: If it is already cancelled
        """
        with logfire.span(
            "activity_service.cancel_activity",
            activity_id=str(activity_id),
            user_id=user_id,
        ):
            activity = await self._get_owned(activity_id, user_id)
            if activity.is_cancelled:
                raise InvalidTransitionError(
                    "activity",
                    str(activity_id),
                    activity.status.value,
                    ActivityStatus.CANCELLED.value,
                )

            cancelled = await self.activity_repository.update(
                activity.evolve(status=ActivityStatus.CANCELLED, updated_at=utcnow())
            )
            logfire.info("Activity cancelled", activity_id=str(activity_id))
            return cancelled

    async def transfer_ownership(
        self, activity_id: ActivityId, user_id: UserId, new_owner_id: UserId
    ) -> Activity:
        """Hand the organizer role to a current participant.

        The new organizer's participation row is removed and the previous
        organizer becomes a regular participant, so capacity is unchanged.

        Raises:
            NotFoundError: If the activity does not exist
            NotAuthorizedError: If the user is not the organizer
            InvalidTransitionError: If the activity is cancelled
            BusinessRuleViolationError: If the new owner has not joined
        """
        with logfire.span(
            "activity_service.transfer_ownership",
            activity_id=str(activity_id),
            user_id=user_id,
            new_owner_id=new_owner_id,
        ):
            activity = await self._get_owned(activity_id, user_id)
            if activity.is_cancelled:
                raise InvalidTransitionError(
                    "activity", str(activity_id), activity.status.value, "transferred"
                )
            if new_owner_id == user_id:
                raise BusinessRuleViolationError("You already organize this activity")

            participants = await self.participant_ids(activity_id)
            if new_owner_id not in participants:
                raise BusinessRuleViolationError(
                    "The new organizer must be a participant of the activity"
                )

            await self.participation_repository.delete(activity_id, new_owner_id)
            await self.participation_repository.insert(
                Participation(activity_id=activity_id, user_id=user_id, joined_at=utcnow())
            )
            transferred = await self.activity_repository.update(
                activity.evolve(creator_id=new_owner_id, updated_at=utcnow())
            )

            logfire.info(
                "Activity ownership transferred",
                activity_id=str(activity_id),
                previous_owner=user_id,
                new_owner=new_owner_id,
            )
            return transferred

    async def participant_ids(self, activity_id: ActivityId) -> set[UserId]:
        """IDs of users with a participation row for the activity."""
        participations = await self.participation_repository.find_by_activities(
            [activity_id]
        )
        return {p.user_id for p in participations}

    async def participants_by_activity(
        self, activity_ids: Collection[ActivityId]
    ) -> dict[ActivityId, list[Participation]]:
        """Participations grouped by activity, in join order."""
        grouped: dict[ActivityId, list[Participation]] = defaultdict(list)
        if not activity_ids:
            return grouped
        for participation in await self.participation_repository.find_by_activities(
            activity_ids
        ):
            grouped[participation.activity_id].append(participation)
        return grouped

    async def ensure_visible(
        self,
        activity: Activity,
        viewer_id: UserId,
        friend_ids: set[UserId],
        invited_activity_ids: set[ActivityId],
    ) -> None:
        """Raise unless ``viewer_id`` may see ``activity``.

        Hidden activities are reported exactly like missing ones so their
        existence is not disclosed.

        Args:
            activity: Activity being read or joined
            viewer_id: Requesting user
            friend_ids: ``viewer_id``'s accepted friends
            invited_activity_ids: Activities ``viewer_id`` holds an open
                invitation to

        Raises:
            NotFoundError: If the activity is hidden from ``viewer_id``
        """
        participants = await self.participant_ids(activity.id)
        if not is_visible(
            activity, viewer_id, participants, friend_ids, invited_activity_ids
        ):
            raise NotFoundError("Activity", str(activity.id))

    async def check_join(
        self, activity_id: ActivityId, user_id: UserId | None
    ) -> tuple[Activity, Eligibility]:
        """Evaluate join eligibility against current state."""
        activity = await self.get_activity(activity_id)
        participants = await self.participant_ids(activity_id)
        return activity, can_join(activity, participants, user_id, utcnow())

    async def ensure_can_join(self, activity_id: ActivityId, user_id: UserId) -> bool:
        """Raise unless ``user_id`` may join; already joined is tolerated.

        Returns:
            True if the user still has to be added, False if already joined

        Raises:
            NotFoundError: If the activity does not exist
            BusinessRuleViolationError: With every reason the join is refused
        """
        _, eligibility = await self.check_join(activity_id, user_id)
        if eligibility.allowed:
            return True
        if ALREADY_JOINED in eligibility.reasons:
            # Already a participant: nothing left to check or do
            return False

        logfire.warn(
            "Join refused",
            activity_id=str(activity_id),
            user_id=user_id,
            reasons=eligibility.reasons,
        )
        raise BusinessRuleViolationError(eligibility.reasons[0], eligibility.reasons)

    async def join(self, activity_id: ActivityId, user_id: UserId) -> bool:
        """Join an activity. Joining twice is a no-op.

        Returns:
            True if a participation row was created, False if already joined

        Raises:
            NotFoundError: If the activity does not exist
            BusinessRuleViolationError: If the user may not join
        """
        with logfire.span(
            "activity_service.join", activity_id=str(activity_id), user_id=user_id
        ):
            if not await self.ensure_can_join(activity_id, user_id):
                logfire.info(
                    "Already joined", activity_id=str(activity_id), user_id=user_id
                )
                return False

            try:
                await self.participation_repository.insert(
                    Participation(
                        activity_id=activity_id, user_id=user_id, joined_at=utcnow()
                    )
                )
            except DuplicateError:
                logfire.info(
                    "Concurrent duplicate join ignored",
                    activity_id=str(activity_id),
                    user_id=user_id,
                )
                return False

            logfire.info("Joined activity", activity_id=str(activity_id), user_id=user_id)
            return True

    async def leave(self, activity_id: ActivityId, user_id: UserId) -> bool:
        """Leave an activity. Leaving one you have not joined is not an error.

        Returns:
            True if a participation row was removed

        Raises:
            NotFoundError: If the activity does not exist
            BusinessRuleViolationError: If the user is the organizer
        """
        with logfire.span(
            "activity_service.leave", activity_id=str(activity_id), user_id=user_id
        ):
            activity = await self.get_activity(activity_id)
            if activity.creator_id == user_id:
                raise BusinessRuleViolationError(IS_CREATOR_LEAVE)

            deleted = await self.participation_repository.delete(activity_id, user_id)
            logfire.info(
                "Left activity" if deleted else "Leave without participation",
                activity_id=str(activity_id),
                user_id=user_id,
            )
            return deleted

    async def list_created(
        self, user_id: UserId, include_cancelled: bool = False
    ) -> list[Activity]:
        """Activities organized by ``user_id``, soonest first."""
        return await self.activity_repository.find_by_creator(
            user_id, include_cancelled=include_cancelled
        )

    async def list_joined(self, user_id: UserId) -> list[Activity]:
        """Activities ``user_id`` joined as a participant, soonest first."""
        activity_ids = await self.participation_repository.find_activity_ids_for_user(
            user_id
        )
        if not activity_ids:
            return []
        return await self.activity_repository.find_by_ids(activity_ids)

    async def feed(
        self,
        user_id: UserId,
        friend_ids: Collection[UserId],
        invited_activity_ids: Collection[ActivityId],
        days_ahead: int | None = None,
        now: datetime | None = None,
    ) -> list[Activity]:
        """Upcoming activities visible to ``user_id``, excluding their own.

        Args:
            user_id: Viewer
            friend_ids: Viewer's accepted friends
            invited_activity_ids: Activities the viewer holds invitations to
            days_ahead: Window size; defaults to the configured default and is
                capped at the configured maximum
            now: Reference time

        Returns:
            Activities starting within the window, soonest first

        Raises:
            ValidationError: If ``days_ahead`` is not positive
        """
        days = days_ahead if days_ahead is not None else self.settings.default_days_ahead
        if days < 1:
            raise ValidationError("days_ahead must be at least 1")
        days = min(days, self.settings.max_days_ahead)

        now = now or utcnow()
        with logfire.span("activity_service.feed", user_id=user_id, days_ahead=days):
            activities = await self.activity_repository.find_visible_upcoming(
                start=now,
                end=now + timedelta(days=days),
                exclude_creator=user_id,
                friend_ids=friend_ids,
                invited_activity_ids=invited_activity_ids,
            )
            logfire.info("Feed loaded", user_id=user_id, count=len(activities))
            return activities
