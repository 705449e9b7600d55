"""PostgreSQL implementation of Invitation repository."""

from datetime import datetime

from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rally.domain.error import DuplicateError
from rally.domain.model import ActivityInvitation
from rally.domain.repository import InvitationRepository
from rally.domain.value import ActivityId, InvitationId, InvitationStatus, UserId
from rally.persistence.database import is_unique_violation
from rally.persistence.mappers import invitation_to_dict, row_to_invitation
from rally.persistence.tables import activity_invitations_table

invitations = activity_invitations_table


class PostgresInvitationRepository(InvitationRepository):
    """PostgreSQL implementation of InvitationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, invitation_id: InvitationId) -> ActivityInvitation | None:
        """Find an invitation by ID."""
        stmt = select(invitations).where(invitations.c.id == invitation_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def insert(self, invitation: ActivityInvitation) -> ActivityInvitation:
        """Insert a new invitation inside a SAVEPOINT.

        Raises:
            DuplicateError: If the user was already invited to the activity
        """
        stmt = insert(invitations).values(**invitation_to_dict(invitation))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateError(
                    "invitation",
                    f"{invitation.activity_id}:{invitation.invited_user_id}",
                ) from e
            raise
        return invitation

    async def respond(
        self,
        invitation_id: InvitationId,
        invited_user_id: UserId,
        status: InvitationStatus,
        responded_at: datetime,
    ) -> ActivityInvitation | None:
        """Answer a pending invitation on behalf of its addressee."""
        stmt = (
            update(invitations)
            .where(
                and_(
                    invitations.c.id == invitation_id,
                    invitations.c.invited_user_id == invited_user_id,
                    invitations.c.status == InvitationStatus.PENDING.value,
                )
            )
            .values(status=status.value, responded_at=responded_at)
            .returning(invitations)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def delete_pending(
        self, invitation_id: InvitationId, invited_by: UserId
    ) -> bool:
        """Delete a pending invitation sent by ``invited_by``."""
        stmt = delete(invitations).where(
            and_(
                invitations.c.id == invitation_id,
                invitations.c.invited_by == invited_by,
                invitations.c.status == InvitationStatus.PENDING.value,
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def find_pending_for_user(self, user_id: UserId) -> list[ActivityInvitation]:
        """Find pending invitations addressed to a user, newest first."""
        stmt = (
            select(invitations)
            .where(
                and_(
                    invitations.c.invited_user_id == user_id,
                    invitations.c.status == InvitationStatus.PENDING.value,
                )
            )
            .order_by(invitations.c.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [row_to_invitation(dict(row)) for row in result.mappings().all()]

    async def find_by_activity(self, activity_id: ActivityId) -> list[ActivityInvitation]:
        """Find every invitation sent for an activity, newest first."""
        stmt = (
            select(invitations)
            .where(invitations.c.activity_id == activity_id)
            .order_by(invitations.c.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [row_to_invitation(dict(row)) for row in result.mappings().all()]

    async def find_open_activity_ids_for_user(self, user_id: UserId) -> set[ActivityId]:
        """Find activities a user holds a pending or accepted invitation to."""
        stmt = select(invitations.c.activity_id).where(
            and_(
                invitations.c.invited_user_id == user_id,
                invitations.c.status.in_(
                    [InvitationStatus.PENDING.value, InvitationStatus.ACCEPTED.value]
                ),
            )
        )
        result = await self.session.execute(stmt)
        return {ActivityId(row.activity_id) for row in result.all()}
