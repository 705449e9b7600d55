"""SQLAlchemy table definitions for Rally.

Domain models are mapped to and from these tables by hand in
``rally.persistence.mappers``. They match the schema defined in Alembic
migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# PROFILES TABLE (keyed by the auth provider's user id)
# ============================================================================
profiles_table = Table(
    "profiles",
    metadata,
    Column("id", String(255), primary_key=True),
    Column("display_name", String(100), nullable=False),
    Column("avatar_url", Text, nullable=True),  # Direct URL or storage path
    Column("location", String(255), nullable=True),
    Column("location_lat", Float, nullable=True),
    Column("location_lng", Float, nullable=True),
    Column("last_seen_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_profiles_display_name", profiles_table.c.display_name)
Index(
    "idx_profiles_coordinates",
    profiles_table.c.location_lat,
    profiles_table.c.location_lng,
)

# ============================================================================
# FRIENDSHIPS TABLE (one row per unordered pair)
# ============================================================================
friendships_table = Table(
    "friendships",
    metadata,
    Column(
        "user_a",
        String(255),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "user_b",
        String(255),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("status", String(20), nullable=False),
    Column("requested_by", String(255), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    PrimaryKeyConstraint("user_a", "user_b", name="pk_friendships"),
    CheckConstraint("user_a < user_b", name="friendship_canonical_order"),
    CheckConstraint(
        "status IN ('pending', 'accepted', 'blocked')", name="friendship_status"
    ),
    CheckConstraint(
        "requested_by = user_a OR requested_by = user_b",
        name="friendship_requester_in_pair",
    ),
)

Index("idx_friendships_user_b", friendships_table.c.user_b)

# ============================================================================
# ACTIVITIES TABLE
# ============================================================================
activities_table = Table(
    "activities",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "creator_id",
        String(255),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("title", String(100), nullable=False),
    Column("description", String(500), nullable=True),
    Column("date_time", TIMESTAMP(timezone=True), nullable=False),
    Column("location", String(255), nullable=True),
    Column("location_lat", Float, nullable=True),
    Column("location_lng", Float, nullable=True),
    Column("visibility", String(20), nullable=False, server_default="friends"),
    Column("activity_type", String(30), nullable=False, server_default="other"),
    Column("max_participants", Integer, nullable=False),
    Column("distance", String(50), nullable=True),
    Column("duration", String(50), nullable=True),
    Column("status", String(20), nullable=False, server_default="active"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("max_participants >= 1", name="activity_capacity_positive"),
)

Index("idx_activities_creator_id", activities_table.c.creator_id)
Index(
    "idx_activities_status_date_time",
    activities_table.c.status,
    activities_table.c.date_time,
)

# ============================================================================
# ACTIVITY_PARTICIPANTS TABLE
# ============================================================================
activity_participants_table = Table(
    "activity_participants",
    metadata,
    Column(
        "activity_id",
        UUID(as_uuid=True),
        ForeignKey("activities.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "user_id",
        String(255),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("status", String(20), nullable=False, server_default="joined"),
    Column(
        "joined_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("activity_id", "user_id", name="uq_activity_participant"),
)

Index("idx_activity_participants_user_id", activity_participants_table.c.user_id)

# ============================================================================
# ACTIVITY_INVITATIONS TABLE
# ============================================================================
activity_invitations_table = Table(
    "activity_invitations",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "activity_id",
        UUID(as_uuid=True),
        ForeignKey("activities.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "invited_user_id",
        String(255),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "invited_by",
        String(255),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("status", String(20), nullable=False, server_default="pending"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("responded_at", TIMESTAMP(timezone=True), nullable=True),
    UniqueConstraint("activity_id", "invited_user_id", name="uq_activity_invitation"),
)

Index(
    "idx_activity_invitations_invited_user",
    activity_invitations_table.c.invited_user_id,
    activity_invitations_table.c.status,
)

# ============================================================================
# NOTIFICATIONS TABLE
# ============================================================================
notifications_table = Table(
    "notifications",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "user_id",
        String(255),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("type", String(50), nullable=False),
    Column("title", String(255), nullable=False),
    Column("message", Text, nullable=False),
    Column("metadata", JSONB, nullable=False, server_default="{}"),
    Column("read", Boolean, nullable=False, server_default="false"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index(
    "idx_notifications_user_created",
    notifications_table.c.user_id,
    notifications_table.c.created_at.desc(),
)
