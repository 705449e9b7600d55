"""PostgreSQL implementations of Notification repository and sink."""

from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rally.domain.model import Notification
from rally.domain.repository import NotificationRepository, NotificationSink
from rally.domain.value import NotificationId, UserId
from rally.persistence.database import get_session
from rally.persistence.mappers import notification_to_dict, row_to_notification
from rally.persistence.tables import notifications_table


class PostgresNotificationRepository(NotificationRepository):
    """PostgreSQL implementation of NotificationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def save(self, notification: Notification) -> Notification:
        """Insert a notification."""
        stmt = insert(notifications_table).values(**notification_to_dict(notification))
        await self.session.execute(stmt)
        await self.session.flush()
        return notification

    async def find_for_user(self, user_id: UserId, limit: int) -> list[Notification]:
        """Find a user's most recent notifications, newest first."""
        stmt = (
            select(notifications_table)
            .where(notifications_table.c.user_id == user_id)
            .order_by(notifications_table.c.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [row_to_notification(dict(row)) for row in result.mappings().all()]

    async def count_unread(self, user_id: UserId) -> int:
        """Count unread notifications."""
        stmt = (
            select(func.count())
            .select_from(notifications_table)
            .where(
                and_(
                    notifications_table.c.user_id == user_id,
                    notifications_table.c.read.is_(False),
                )
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def mark_read(self, notification_id: NotificationId, user_id: UserId) -> bool:
        """Mark one notification read, only if the user owns it."""
        stmt = (
            update(notifications_table)
            .where(
                and_(
                    notifications_table.c.id == notification_id,
                    notifications_table.c.user_id == user_id,
                )
            )
            .values(read=True)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def mark_all_read(self, user_id: UserId) -> int:
        """Mark every unread notification of a user read."""
        stmt = (
            update(notifications_table)
            .where(
                and_(
                    notifications_table.c.user_id == user_id,
                    notifications_table.c.read.is_(False),
                )
            )
            .values(read=True)
        )
        result = await self.session.execute(stmt)
        return result.rowcount


class PostgresNotificationSink(NotificationSink):
    """Delivers notifications in their own short transaction.

    Holds the session factory rather than the request session, so delivery
    never joins (or waits on) the transaction of the triggering request.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def deliver(self, notification: Notification) -> None:
        """Insert the notification and commit."""
        async with get_session(self.session_factory) as session:
            await PostgresNotificationRepository(session).save(notification)
