"""PostgreSQL implementation of Profile repository."""

from collections.abc import Collection
from datetime import datetime

from sqlalchemy import and_, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from rally.domain.model import Profile
from rally.domain.repository import ProfileRepository
from rally.domain.value import UserId
from rally.persistence.mappers import profile_to_dict, row_to_profile
from rally.persistence.tables import profiles_table


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PostgresProfileRepository(ProfileRepository):
    """PostgreSQL implementation of ProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Profile | None:
        """Find a profile by user ID."""
        stmt = select(profiles_table).where(profiles_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_profile(dict(row)) if row else None

    async def find_by_ids(self, user_ids: Collection[UserId]) -> list[Profile]:
        """Find profiles for a batch of users in one query."""
        if not user_ids:
            return []

        stmt = select(profiles_table).where(profiles_table.c.id.in_(list(user_ids)))
        result = await self.session.execute(stmt)
        return [row_to_profile(dict(row)) for row in result.mappings().all()]

    async def search_by_name(
        self, query: str, exclude_ids: Collection[UserId], limit: int
    ) -> list[Profile]:
        """Case-insensitive substring search on display name.

        LIKE wildcards in the query are escaped so they match literally.
        """
        pattern = f"%{_escape_like(query)}%"
        stmt = (
            select(profiles_table)
            .where(profiles_table.c.display_name.ilike(pattern, escape="\\"))
            .order_by(profiles_table.c.display_name)
            .limit(limit)
        )
        if exclude_ids:
            stmt = stmt.where(profiles_table.c.id.not_in(list(exclude_ids)))

        result = await self.session.execute(stmt)
        return [row_to_profile(dict(row)) for row in result.mappings().all()]

    async def find_within_bounds(
        self,
        min_lat: float,
        max_lat: float,
        min_lng: float,
        max_lng: float,
        exclude_ids: Collection[UserId],
    ) -> list[Profile]:
        """Find profiles whose coordinates fall inside a bounding box."""
        stmt = select(profiles_table).where(
            and_(
                profiles_table.c.location.is_not(None),
                profiles_table.c.location_lat.between(min_lat, max_lat),
                profiles_table.c.location_lng.between(min_lng, max_lng),
            )
        )
        if exclude_ids:
            stmt = stmt.where(profiles_table.c.id.not_in(list(exclude_ids)))

        result = await self.session.execute(stmt)
        return [row_to_profile(dict(row)) for row in result.mappings().all()]

    async def upsert(self, profile: Profile) -> Profile:
        """Insert a profile or overwrite the existing row with the same ID.

        ``created_at`` of an existing row is preserved.
        """
        values = profile_to_dict(profile)
        stmt = insert(profiles_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[profiles_table.c.id],
            set_={
                key: stmt.excluded[key]
                for key in values
                if key not in ("id", "created_at")
            },
        ).returning(profiles_table)

        result = await self.session.execute(stmt)
        row = result.mappings().one()
        await self.session.flush()
        return row_to_profile(dict(row))

    async def touch_last_seen(self, user_id: UserId, seen_at: datetime) -> None:
        """Record user activity for online indicators."""
        stmt = (
            update(profiles_table)
            .where(profiles_table.c.id == user_id)
            .values(last_seen_at=seen_at)
        )
        await self.session.execute(stmt)
