"""PostgreSQL implementation of Friendship repository."""

from datetime import datetime

from sqlalchemy import and_, delete, insert, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rally.domain.error import DuplicateError
from rally.domain.model import Friendship
from rally.domain.repository import FriendshipRepository
from rally.domain.value import FriendshipStatus, UserId
from rally.persistence.database import is_unique_violation
from rally.persistence.mappers import friendship_to_dict, row_to_friendship
from rally.persistence.tables import friendships_table


class PostgresFriendshipRepository(FriendshipRepository):
    """PostgreSQL implementation of FriendshipRepository.

    The primary key on ``(user_a, user_b)`` together with the canonical
    order check makes concurrent requests between the same two users
    collapse into one row.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def _pair_clause(self, user_a: UserId, user_b: UserId):
        return and_(
            friendships_table.c.user_a == user_a,
            friendships_table.c.user_b == user_b,
        )

    async def find_pair(self, user_a: UserId, user_b: UserId) -> Friendship | None:
        """Find the edge for a canonical pair."""
        stmt = select(friendships_table).where(self._pair_clause(user_a, user_b))
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_friendship(dict(row)) if row else None

    async def find_for_user(self, user_id: UserId) -> list[Friendship]:
        """Find every edge touching a user, in any status."""
        stmt = (
            select(friendships_table)
            .where(
                or_(
                    friendships_table.c.user_a == user_id,
                    friendships_table.c.user_b == user_id,
                )
            )
            .order_by(friendships_table.c.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [row_to_friendship(dict(row)) for row in result.mappings().all()]

    async def insert(self, friendship: Friendship) -> Friendship:
        """Insert a new edge.

        Runs inside a SAVEPOINT so a rejected insert leaves the request
        transaction usable.

        Raises:
            DuplicateError: If an edge already exists for the pair
        """
        stmt = insert(friendships_table).values(**friendship_to_dict(friendship))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateError(
                    "friendship", f"{friendship.user_a}:{friendship.user_b}"
                ) from e
            raise
        return friendship

    async def update_status(
        self,
        user_a: UserId,
        user_b: UserId,
        from_status: FriendshipStatus,
        to_status: FriendshipStatus,
        updated_at: datetime,
    ) -> Friendship | None:
        """Move an edge between statuses if it is currently in ``from_status``."""
        stmt = (
            update(friendships_table)
            .where(
                and_(
                    self._pair_clause(user_a, user_b),
                    friendships_table.c.status == from_status.value,
                )
            )
            .values(status=to_status.value, updated_at=updated_at)
            .returning(friendships_table)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_friendship(dict(row)) if row else None

    async def delete_pair(
        self,
        user_a: UserId,
        user_b: UserId,
        status: FriendshipStatus | None = None,
        requested_by: UserId | None = None,
    ) -> bool:
        """Delete the edge for a pair, optionally only in a given state."""
        stmt = delete(friendships_table).where(self._pair_clause(user_a, user_b))
        if status is not None:
            stmt = stmt.where(friendships_table.c.status == status.value)
        if requested_by is not None:
            stmt = stmt.where(friendships_table.c.requested_by == requested_by)

        result = await self.session.execute(stmt)
        return result.rowcount > 0
