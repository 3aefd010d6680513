"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict, Iterable
from uuid import UUID

from discuss.domain.model import Comment
from discuss.domain.value import (
    Attachment,
    CommentId,
    CommentStatus,
    CommentTarget,
    EditRecord,
    Flag,
    FlagReason,
    Like,
    TargetKind,
    UserId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_like(row: Dict[str, Any]) -> Like:
    """Convert a comment_likes row to a Like value."""
    return Like(user_id=_uuid(row["user_id"]), liked_at=row["liked_at"])


def row_to_flag(row: Dict[str, Any]) -> Flag:
    """Convert a comment_flags row to a Flag value."""
    return Flag(
        user_id=_uuid(row["user_id"]),
        reason=FlagReason(row["reason"]),
        description=row.get("description"),
        flagged_at=row["flagged_at"],
    )


def row_to_edit(row: Dict[str, Any]) -> EditRecord:
    """Convert a comment_edits row to an EditRecord value."""
    return EditRecord(content=row["content"], edited_at=row["edited_at"])


def row_to_comment(
    row: Dict[str, Any],
    likes: Iterable[Like] = (),
    flags: Iterable[Flag] = (),
    edit_history: Iterable[EditRecord] = (),
) -> Comment:
    """Convert database row to Comment domain model.

    Args:
        row: comments row as dict
        likes: Likes loaded from comment_likes
        flags: Flags loaded from comment_flags
        edit_history: Edits loaded from comment_edits, oldest first

    Returns:
        Comment domain model
    """
    return Comment(
        id=CommentId(_uuid(row["id"])),
        content=row["content"],
        author_id=UserId(_uuid(row["author_id"])),
        target=CommentTarget(
            kind=TargetKind(row["target_kind"]), id=_uuid(row["target_id"])
        ),
        parent_id=CommentId(_uuid(row["parent_id"])) if row.get("parent_id") else None,
        thread_level=row["thread_level"],
        reply_count=row["reply_count"],
        likes=list(likes),
        like_count=row["like_count"],
        flags=list(flags),
        status=CommentStatus(row["status"]),
        moderation_notes=row.get("moderation_notes"),
        is_deleted=row["is_deleted"],
        deleted_at=row.get("deleted_at"),
        is_edited=row["is_edited"],
        edit_history=list(edit_history),
        mentions=[UserId(_uuid(m)) for m in row.get("mentions") or []],
        attachments=[Attachment.model_validate(a) for a in row.get("attachments") or []],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to a comments row dict.

    Collections stored in their own tables (likes, flags, edit history) are
    not part of the row.

    Args:
        comment: Comment domain model

    Returns:
        Dict suitable for database insertion
    """
    return {
        "id": comment.id,
        "content": comment.content,
        "author_id": comment.author_id,
        "target_kind": comment.target.kind.value,
        "target_id": comment.target.id,
        "parent_id": comment.parent_id,
        "thread_level": comment.thread_level,
        "reply_count": comment.reply_count,
        "like_count": comment.like_count,
        "flag_count": comment.flag_count,
        "status": comment.status.value,
        "moderation_notes": comment.moderation_notes,
        "is_deleted": comment.is_deleted,
        "deleted_at": comment.deleted_at,
        "is_edited": comment.is_edited,
        "mentions": list(comment.mentions),
        "attachments": [a.model_dump(mode="json") for a in comment.attachments],
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
    }
