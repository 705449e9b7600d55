"""initial_schema

Create the schema for Rally:
- Profiles (keyed by the auth provider's user id)
- Friendships (one row per unordered pair: pending, accepted or blocked)
- Activities (with visibility, capacity and soft cancellation)
- Activity participants
- Activity invitations
- Notifications (in-app inbox)

Revision ID: 3f2c9a71d0b4
Revises:
Create Date: 2026-10-18 10:12:44.201937

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f2c9a71d0b4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # PROFILES table
    # ========================================================================
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(255), nullable=False),  # Auth provider user id
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("avatar_url", sa.Text(), nullable=True),  # URL or storage path
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("location_lat", sa.Float(), nullable=True),
        sa.Column("location_lng", sa.Float(), nullable=True),
        sa.Column("last_seen_at", sa.TIMESTAMP(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_profiles_display_name", "profiles", ["display_name"])
    op.create_index(
        "idx_profiles_coordinates", "profiles", ["location_lat", "location_lng"]
    )

    # ========================================================================
    # FRIENDSHIPS table
    # ========================================================================
    op.create_table(
        "friendships",
        sa.Column("user_a", sa.String(255), nullable=False),  # Lower id of the pair
        sa.Column("user_b", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("requested_by", sa.String(255), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_a"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_b"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_a", "user_b", name="pk_friendships"),
        sa.CheckConstraint("user_a < user_b", name="friendship_canonical_order"),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'blocked')", name="friendship_status"
        ),
        sa.CheckConstraint(
            "requested_by = user_a OR requested_by = user_b",
            name="friendship_requester_in_pair",
        ),
    )
    op.create_index("idx_friendships_user_b", "friendships", ["user_b"])

    # ========================================================================
    # ACTIVITIES table
    # ========================================================================
    op.create_table(
        "activities",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("creator_id", sa.String(255), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("date_time", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("location_lat", sa.Float(), nullable=True),
        sa.Column("location_lng", sa.Float(), nullable=True),
        sa.Column(
            "visibility", sa.String(20), nullable=False, server_default="friends"
        ),
        sa.Column(
            "activity_type", sa.String(30), nullable=False, server_default="other"
        ),
        sa.Column("max_participants", sa.Integer(), nullable=False),
        sa.Column("distance", sa.String(50), nullable=True),
        sa.Column("duration", sa.String(50), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["creator_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("max_participants >= 1", name="activity_capacity_positive"),
        sa.CheckConstraint(
            "visibility IN ('friends', 'private', 'public')",
            name="activity_visibility",
        ),
        sa.CheckConstraint(
            "status IN ('active', 'cancelled')", name="activity_status"
        ),
    )
    op.create_index("idx_activities_creator_id", "activities", ["creator_id"])
    op.create_index(
        "idx_activities_status_date_time", "activities", ["status", "date_time"]
    )

    # ========================================================================
    # ACTIVITY_PARTICIPANTS table
    # ========================================================================
    op.create_table(
        "activity_participants",
        sa.Column("activity_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="joined"),
        sa.Column(
            "joined_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(
            ["activity_id"], ["activities.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("activity_id", "user_id", name="uq_activity_participant"),
    )
    op.create_index(
        "idx_activity_participants_user_id", "activity_participants", ["user_id"]
    )

    # ========================================================================
    # ACTIVITY_INVITATIONS table
    # ========================================================================
    op.create_table(
        "activity_invitations",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("activity_id", sa.UUID(), nullable=False),
        sa.Column("invited_user_id", sa.String(255), nullable=False),
        sa.Column("invited_by", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("responded_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["activity_id"], ["activities.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["invited_user_id"], ["profiles.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["invited_by"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "activity_id", "invited_user_id", name="uq_activity_invitation"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'declined')",
            name="invitation_status",
        ),
    )
    op.create_index(
        "idx_activity_invitations_invited_user",
        "activity_invitations",
        ["invited_user_id", "status"],
    )

    # ========================================================================
    # NOTIFICATIONS table
    # ========================================================================
    op.create_table(
        "notifications",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "metadata",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("read", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.execute(
        "CREATE INDEX idx_notifications_user_created "
        "ON notifications (user_id, created_at DESC)"
    )

    # ========================================================================
    # TRIGGERS
    # ========================================================================

    # Trigger function to update updated_at timestamp
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
    """)

    for table in ("profiles", "friendships", "activities"):
        op.execute(f"""
            CREATE TRIGGER update_{table}_updated_at
            BEFORE UPDATE ON {table}
            FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()
        """)


def downgrade() -> None:
    """Downgrade schema."""
    for table in ("activities", "friendships", "profiles"):
        op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    # Drop tables (in reverse order of dependencies)
    op.drop_table("notifications")
    op.drop_table("activity_invitations")
    op.drop_table("activity_participants")
    op.drop_table("activities")
    op.drop_table("friendships")
    op.drop_table("profiles")
