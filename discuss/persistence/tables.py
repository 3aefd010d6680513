"""SQLAlchemy table definitions for the discussion engine.

These table definitions are used for Core queries and mirror the schema
created by the Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("content", Text, nullable=False),
    Column("author_id", UUID, nullable=False),  # Identity owned by another service
    Column(
        "target_kind",
        Enum("idea", "domain", "comment", name="comment_target_kind", create_type=False),
        nullable=False,
    ),
    Column("target_id", UUID, nullable=False),
    Column(
        "parent_id", UUID, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    ),
    Column("thread_level", Integer, nullable=False, server_default="0"),
    Column("reply_count", Integer, nullable=False, server_default="0"),
    Column("like_count", Integer, nullable=False, server_default="0"),
    Column("flag_count", Integer, nullable=False, server_default="0"),
    Column(
        "status",
        Enum(
            "active", "flagged", "hidden", "spam", name="comment_status", create_type=False
        ),
        nullable=False,
        server_default="active",
    ),
    Column("moderation_notes", Text, nullable=True),
    Column("is_deleted", Boolean, nullable=False, server_default="false"),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    Column("is_edited", Boolean, nullable=False, server_default="false"),
    Column("mentions", ARRAY(UUID), nullable=False, server_default="{}"),
    Column("attachments", JSONB, nullable=False, server_default="[]"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("thread_level BETWEEN 0 AND 5", name="thread_level_range"),
    CheckConstraint("reply_count >= 0", name="reply_count_non_negative"),
    CheckConstraint("like_count >= 0", name="like_count_non_negative"),
    CheckConstraint(
        "(target_kind = 'comment') = (parent_id IS NOT NULL)",
        name="reply_has_parent",
    ),
)

# Root comment pagination: (target, parent IS NULL) ordered by time
Index(
    "idx_comments_target_roots",
    comments_table.c.target_kind,
    comments_table.c.target_id,
    comments_table.c.created_at.desc(),
    postgresql_where=comments_table.c.parent_id.is_(None),
)
Index("idx_comments_parent_id", comments_table.c.parent_id, comments_table.c.created_at)
Index("idx_comments_author_id", comments_table.c.author_id, comments_table.c.created_at.desc())
Index("idx_comments_visibility", comments_table.c.status, comments_table.c.is_deleted)

# ============================================================================
# COMMENT LIKES TABLE (one row per user per comment)
# ============================================================================
comment_likes_table = Table(
    "comment_likes",
    metadata,
    Column(
        "comment_id", UUID, ForeignKey("comments.id", ondelete="CASCADE"), nullable=False
    ),
    Column("user_id", UUID, nullable=False),
    Column(
        "liked_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("comment_id", "user_id", name="uq_comment_like"),
)

Index("idx_comment_likes_comment_id", comment_likes_table.c.comment_id)

# ============================================================================
# COMMENT FLAGS TABLE (one row per user per comment)
# ============================================================================
comment_flags_table = Table(
    "comment_flags",
    metadata,
    Column(
        "comment_id", UUID, ForeignKey("comments.id", ondelete="CASCADE"), nullable=False
    ),
    Column("user_id", UUID, nullable=False),
    Column(
        "reason",
        Enum(
            "spam",
            "inappropriate",
            "harassment",
            "misinformation",
            "other",
            name="comment_flag_reason",
            create_type=False,
        ),
        nullable=False,
    ),
    Column("description", String(1000), nullable=True),
    Column(
        "flagged_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("comment_id", "user_id", name="uq_comment_flag"),
)

Index("idx_comment_flags_comment_id", comment_flags_table.c.comment_id)

# ============================================================================
# COMMENT EDITS TABLE (append-only edit history)
# ============================================================================
comment_edits_table = Table(
    "comment_edits",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "comment_id", UUID, ForeignKey("comments.id", ondelete="CASCADE"), nullable=False
    ),
    Column("content", Text, nullable=False),
    Column(
        "edited_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_comment_edits_comment_id", comment_edits_table.c.comment_id, comment_edits_table.c.id)
