"""PostgreSQL implementations of Activity and Participation repositories."""

from collections.abc import Collection
from datetime import datetime

from sqlalchemy import and_, delete, insert, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rally.domain.error import DuplicateError, NotFoundError
from rally.domain.model import Activity, Participation
from rally.domain.repository import ActivityRepository, ParticipationRepository
from rally.domain.value import (
    ActivityId,
    ActivityStatus,
    ActivityVisibility,
    UserId,
)
from rally.persistence.database import is_unique_violation
from rally.persistence.mappers import (
    activity_to_dict,
    participation_to_dict,
    row_to_activity,
    row_to_participation,
)
from rally.persistence.tables import activities_table, activity_participants_table


class PostgresActivityRepository(ActivityRepository):
    """PostgreSQL implementation of ActivityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, activity_id: ActivityId) -> Activity | None:
        """Find an activity by ID."""
        stmt = select(activities_table).where(activities_table.c.id == activity_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_activity(dict(row)) if row else None

    async def find_by_ids(self, activity_ids: Collection[ActivityId]) -> list[Activity]:
        """Find a batch of activities ordered by start time."""
        if not activity_ids:
            return []

        stmt = (
            select(activities_table)
            .where(activities_table.c.id.in_(list(activity_ids)))
            .order_by(activities_table.c.date_time.asc())
        )
        result = await self.session.execute(stmt)
        return [row_to_activity(dict(row)) for row in result.mappings().all()]

    async def find_by_creator(
        self, creator_id: UserId, include_cancelled: bool = False
    ) -> list[Activity]:
        """Find activities organized by a user, soonest first."""
        stmt = (
            select(activities_table)
            .where(activities_table.c.creator_id == creator_id)
            .order_by(activities_table.c.date_time.asc())
        )
        if not include_cancelled:
            stmt = stmt.where(
                activities_table.c.status == ActivityStatus.ACTIVE.value
            )

        result = await self.session.execute(stmt)
        return [row_to_activity(dict(row)) for row in result.mappings().all()]

    async def find_visible_upcoming(
        self,
        start: datetime,
        end: datetime,
        exclude_creator: UserId,
        friend_ids: Collection[UserId],
        invited_activity_ids: Collection[ActivityId],
    ) -> list[Activity]:
        """Find active activities in a time window that a viewer may see.

        Visibility is decided in one query: public, friends-only by a friend,
        or explicitly invited.
        """
        audience = [activities_table.c.visibility == ActivityVisibility.PUBLIC.value]
        if friend_ids:
            audience.append(
                and_(
                    activities_table.c.visibility == ActivityVisibility.FRIENDS.value,
                    activities_table.c.creator_id.in_(list(friend_ids)),
                )
            )
        if invited_activity_ids:
            audience.append(activities_table.c.id.in_(list(invited_activity_ids)))

        stmt = (
            select(activities_table)
            .where(
                and_(
                    activities_table.c.status == ActivityStatus.ACTIVE.value,
                    activities_table.c.date_time >= start,
                    activities_table.c.date_time <= end,
                    activities_table.c.creator_id != exclude_creator,
                    or_(*audience),
                )
            )
            .order_by(activities_table.c.date_time.asc())
        )
        result = await self.session.execute(stmt)
        return [row_to_activity(dict(row)) for row in result.mappings().all()]

    async def insert(self, activity: Activity) -> Activity:
        """Insert a new activity."""
        stmt = insert(activities_table).values(**activity_to_dict(activity))
        await self.session.execute(stmt)
        await self.session.flush()
        return activity

    async def update(self, activity: Activity) -> Activity:
        """Overwrite an existing activity.

        Raises:
            NotFoundError: If the activity does not exist
        """
        values = activity_to_dict(activity)
        values.pop("id")
        values.pop("created_at")
        stmt = (
            update(activities_table)
            .where(activities_table.c.id == activity.id)
            .values(**values)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError("Activity", str(activity.id))
        return activity


class PostgresParticipationRepository(ParticipationRepository):
    """PostgreSQL implementation of ParticipationRepository.

    The unique constraint on ``(activity_id, user_id)`` turns a double join
    into a DuplicateError.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def insert(self, participation: Participation) -> Participation:
        """Insert a participation row inside a SAVEPOINT.

        Raises:
            DuplicateError: If the user already joined the activity
        """
        stmt = insert(activity_participants_table).values(
            **participation_to_dict(participation)
        )
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateError(
                    "participation",
                    f"{participation.activity_id}:{participation.user_id}",
                ) from e
            raise
        return participation

    async def delete(self, activity_id: ActivityId, user_id: UserId) -> bool:
        """Delete a user's participation."""
        stmt = delete(activity_participants_table).where(
            and_(
                activity_participants_table.c.activity_id == activity_id,
                activity_participants_table.c.user_id == user_id,
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def find_by_activities(
        self, activity_ids: Collection[ActivityId]
    ) -> list[Participation]:
        """Find participations for a batch of activities in one query."""
        if not activity_ids:
            return []

        stmt = (
            select(activity_participants_table)
            .where(activity_participants_table.c.activity_id.in_(list(activity_ids)))
            .order_by(activity_participants_table.c.joined_at.asc())
        )
        result = await self.session.execute(stmt)
        return [row_to_participation(dict(row)) for row in result.mappings().all()]

    async def find_activity_ids_for_user(self, user_id: UserId) -> list[ActivityId]:
        """Find the activities a user joined."""
        stmt = select(activity_participants_table.c.activity_id).where(
            activity_participants_table.c.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return [ActivityId(row.activity_id) for row in result.all()]
