"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from rally.config import Settings
from rally.domain.repository import (
    ActivityRepository,
    FriendshipRepository,
    InvitationRepository,
    NotificationRepository,
    NotificationSink,
    ParticipationRepository,
    ProfileRepository,
)
from rally.persistence.database import create_engine, create_session_factory
from rally.persistence.repository import (
    PostgresActivityRepository,
    PostgresFriendshipRepository,
    PostgresInvitationRepository,
    PostgresNotificationRepository,
    PostgresNotificationSink,
    PostgresParticipationRepository,
    PostgresProfileRepository,
)
from rally.util.di.base import ProviderBase
from rally.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide database engine."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        Every write of one request shares this transaction. It is committed
        at the end of the request if no exception occurred, or rolled back
        if an exception was raised.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.info("Session committed")
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.APP)
    def get_notification_sink(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> NotificationSink:
        """Provide notification sink with its own transactions."""
        return PostgresNotificationSink(session_factory)

    @provide(scope=Scope.REQUEST)
    def get_profile_repository(self, session: AsyncSession) -> ProfileRepository:
        """Provide Profile repository."""
        return PostgresProfileRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_friendship_repository(self, session: AsyncSession) -> FriendshipRepository:
        """Provide Friendship repository."""
        return PostgresFriendshipRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_activity_repository(self, session: AsyncSession) -> ActivityRepository:
        """Provide Activity repository."""
        return PostgresActivityRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_participation_repository(
        self, session: AsyncSession
    ) -> ParticipationRepository:
        """Provide Participation repository."""
        return PostgresParticipationRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_invitation_repository(self, session: AsyncSession) -> InvitationRepository:
        """Provide Invitation repository."""
        return PostgresInvitationRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_notification_repository(
        self, session: AsyncSession
    ) -> NotificationRepository:
        """Provide Notification repository."""
        return PostgresNotificationRepository(session)
