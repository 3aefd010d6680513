"""Test configuration and helpers."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from discuss.domain.model import MAX_THREAD_LEVEL, Comment
from discuss.domain.value import CommentId, CommentTarget, UserId


def make_root(
    target: CommentTarget | None = None,
    author_id: UUID | None = None,
    content: str = "Root comment",
    created_at: datetime | None = None,
    **changes,
) -> Comment:
    """Build a root comment for seeding a repository directly.

    Args:
        target: Idea or domain; a fresh idea when omitted
        author_id: Author; a fresh user when omitted
        content: Comment text
        created_at: Creation time; now when omitted
        **changes: Any other Comment fields

    Returns:
        Comment ready for ``CommentRepository.save``
    """
    created = created_at or datetime.now(UTC)
    return Comment(
        id=CommentId(uuid4()),
        content=content,
        author_id=UserId(author_id or uuid4()),
        target=target or CommentTarget.idea(uuid4()),
        parent_id=None,
        thread_level=0,
        created_at=created,
        updated_at=created,
        **changes,
    )


def make_reply(
    parent: Comment,
    author_id: UUID | None = None,
    content: str = "Reply",
    created_at: datetime | None = None,
    **changes,
) -> Comment:
    """Build a reply to ``parent`` with the clamped thread level.

    Seeding a reply this way does not touch the parent's reply count.
    """
    created = created_at or datetime.now(UTC)
    return Comment(
        id=CommentId(uuid4()),
        content=content,
        author_id=UserId(author_id or uuid4()),
        target=CommentTarget.comment(parent.id),
        parent_id=parent.id,
        thread_level=min(parent.thread_level + 1, MAX_THREAD_LEVEL),
        created_at=created,
        updated_at=created,
        **changes,
    )
