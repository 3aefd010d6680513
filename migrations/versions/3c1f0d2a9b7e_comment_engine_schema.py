"""comment_engine_schema

Create the schema for the threaded comment engine:
- Comments (roots on ideas/domains, replies on comments, capped nesting)
- Comment likes and flags (one row per user per comment)
- Comment edit history (append-only)

Users, ideas and domains live in other services, so their ids are stored
without foreign keys.

Revision ID: 3c1f0d2a9b7e
Revises:
Create Date: 2026-10-19 10:12:41.118204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f0d2a9b7e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _create_enum(name: str, *values: str) -> None:
    labels = ", ".join(f"'{v}'" for v in values)
    op.execute(f"""
        DO $$ BEGIN
            CREATE TYPE {name} AS ENUM ({labels});
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    _create_enum("comment_target_kind", "idea", "domain", "comment")
    _create_enum("comment_status", "active", "flagged", "hidden", "spam")
    _create_enum(
        "comment_flag_reason",
        "spam",
        "inappropriate",
        "harassment",
        "misinformation",
        "other",
    )

    # ========================================================================
    # COMMENTS table
    # ========================================================================
    op.create_table(
        "comments",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column(
            "target_kind",
            postgresql.ENUM(
                "idea", "domain", "comment", name="comment_target_kind", create_type=False
            ),
            nullable=False,
        ),
        sa.Column("target_id", sa.UUID(), nullable=False),
        sa.Column("parent_id", sa.UUID(), nullable=True),
        sa.Column("thread_level", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reply_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("flag_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "status",
            postgresql.ENUM(
                "active",
                "flagged",
                "hidden",
                "spam",
                name="comment_status",
                create_type=False,
            ),
            nullable=False,
            server_default="active",
        ),
        sa.Column("moderation_notes", sa.Text(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("is_edited", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column(
            "mentions",
            postgresql.ARRAY(sa.UUID()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "attachments",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
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
        sa.ForeignKeyConstraint(["parent_id"], ["comments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("thread_level BETWEEN 0 AND 5", name="thread_level_range"),
        sa.CheckConstraint("reply_count >= 0", name="reply_count_non_negative"),
        sa.CheckConstraint("like_count >= 0", name="like_count_non_negative"),
        sa.CheckConstraint(
            "(target_kind = 'comment') = (parent_id IS NOT NULL)",
            name="reply_has_parent",
        ),
    )

    op.execute("""
        CREATE INDEX idx_comments_target_roots
        ON comments (target_kind, target_id, created_at DESC)
        WHERE parent_id IS NULL
    """)
    op.create_index("idx_comments_parent_id", "comments", ["parent_id", "created_at"])
    op.execute(
        "CREATE INDEX idx_comments_author_id ON comments (author_id, created_at DESC)"
    )
    op.create_index("idx_comments_visibility", "comments", ["status", "is_deleted"])

    # ========================================================================
    # COMMENT_LIKES table
    # ========================================================================
    op.create_table(
        "comment_likes",
        sa.Column("comment_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column(
            "liked_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("comment_id", "user_id", name="uq_comment_like"),
    )
    op.create_index("idx_comment_likes_comment_id", "comment_likes", ["comment_id"])

    # ========================================================================
    # COMMENT_FLAGS table
    # ========================================================================
    op.create_table(
        "comment_flags",
        sa.Column("comment_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column(
            "reason",
            postgresql.ENUM(
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
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column(
            "flagged_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("comment_id", "user_id", name="uq_comment_flag"),
    )
    op.create_index("idx_comment_flags_comment_id", "comment_flags", ["comment_id"])

    # ========================================================================
    # COMMENT_EDITS table (append-only)
    # ========================================================================
    op.create_table(
        "comment_edits",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("comment_id", sa.UUID(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "edited_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_comment_edits_comment_id", "comment_edits", ["comment_id", "id"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("comment_edits")
    op.drop_table("comment_flags")
    op.drop_table("comment_likes")
    op.drop_table("comments")

    op.execute("DROP TYPE IF EXISTS comment_flag_reason")
    op.execute("DROP TYPE IF EXISTS comment_status")
    op.execute("DROP TYPE IF EXISTS comment_target_kind")
