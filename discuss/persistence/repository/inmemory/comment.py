"""In-memory comment repository for testing."""

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Optional

from discuss.domain.error import ConflictError, NotFoundError
from discuss.domain.model.comment import Comment
from discuss.domain.repository.comment import CommentRepository
from discuss.domain.value import (
    CommentId,
    CommentStatus,
    CommentTarget,
    EditRecord,
    Flag,
    Like,
    UserId,
)


def _chronological(comments: list[Comment], newest_first: bool) -> list[Comment]:
    return sorted(
        comments, key=lambda c: (c.created_at, str(c.id)), reverse=newest_first
    )


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing.

    No method awaits between reading and writing the store, so each call
    is atomic with respect to other coroutines on the event loop.
    """

    def __init__(self) -> None:
        self._comments: dict[CommentId, Comment] = {}

    def _visible(self) -> list[Comment]:
        return [c for c in self._comments.values() if c.is_visible]

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        return self._comments.get(comment_id)

    async def save(self, comment: Comment) -> Comment:
        """Insert a new comment."""
        if comment.id in self._comments:
            raise ConflictError(f"Comment {comment.id} already exists")
        self._comments[comment.id] = comment
        return comment

    async def find_roots(
        self,
        target: CommentTarget,
        offset: int = 0,
        limit: int = 20,
        newest_first: bool = True,
    ) -> list[Comment]:
        """Find visible root comments attached to a target."""
        roots = [c for c in self._visible() if c.is_root and c.target == target]
        return _chronological(roots, newest_first)[offset : offset + limit]

    async def count_roots(self, target: CommentTarget) -> int:
        """Count visible root comments attached to a target."""
        return sum(1 for c in self._visible() if c.is_root and c.target == target)

    async def find_replies(
        self,
        parent_id: CommentId,
        offset: int = 0,
        limit: int = 10,
        newest_first: bool = False,
    ) -> list[Comment]:
        """Find a page of visible direct replies."""
        replies = [c for c in self._visible() if c.parent_id == parent_id]
        return _chronological(replies, newest_first)[offset : offset + limit]

    async def count_replies(self, parent_id: CommentId) -> int:
        """Count visible direct replies."""
        return sum(1 for c in self._visible() if c.parent_id == parent_id)

    async def find_reply_previews(
        self,
        parent_ids: Sequence[CommentId],
        limit: int,
        newest_first: bool = False,
    ) -> dict[CommentId, list[Comment]]:
        """Find the first replies of each parent."""
        return {
            parent_id: await self.find_replies(
                parent_id, limit=max(0, limit), newest_first=newest_first
            )
            for parent_id in parent_ids
        }

    async def find_children(self, parent_ids: Iterable[CommentId]) -> list[Comment]:
        """Find visible direct children of the given parents."""
        wanted = set(parent_ids)
        children = [c for c in self._visible() if c.parent_id in wanted]
        return _chronological(children, newest_first=False)

    async def find_by_author(
        self,
        author_id: UserId,
        offset: int = 0,
        limit: int = 20,
    ) -> list[Comment]:
        """Find visible comments by a specific author."""
        comments = [c for c in self._visible() if c.author_id == author_id]
        return _chronological(comments, newest_first=True)[offset : offset + limit]

    async def count_by_author(self, author_id: UserId) -> int:
        """Count visible comments by a specific author."""
        return sum(1 for c in self._visible() if c.author_id == author_id)

    async def search(
        self,
        text: str,
        target: Optional[CommentTarget] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> list[Comment]:
        """Case-insensitive substring search."""
        needle = text.casefold()
        matches = [
            c
            for c in self._visible()
            if needle in c.content.casefold() and (target is None or c.target == target)
        ]
        return _chronological(matches, newest_first=True)[offset : offset + limit]

    def _require(self, comment_id: CommentId) -> Comment:
        comment = self._comments.get(comment_id)
        if comment is None:
            raise NotFoundError("Comment", str(comment_id))
        return comment

    async def adjust_reply_count(self, comment_id: CommentId, delta: int) -> None:
        """Add delta to reply_count (minimum 0)."""
        comment = self._require(comment_id)
        self._comments[comment_id] = comment.evolve(
            reply_count=max(0, comment.reply_count + delta)
        )

    async def add_like(
        self, comment_id: CommentId, user_id: UserId, liked_at: datetime
    ) -> bool:
        """Add a like if the user has not liked the comment."""
        comment = self._require(comment_id)
        if comment.is_liked_by(user_id):
            return False
        self._comments[comment_id] = comment.evolve(
            likes=[*comment.likes, Like(user_id=user_id, liked_at=liked_at)],
            like_count=comment.like_count + 1,
        )
        return True

    async def remove_like(self, comment_id: CommentId, user_id: UserId) -> bool:
        """Remove the user's like if present."""
        comment = self._require(comment_id)
        if not comment.is_liked_by(user_id):
            return False
        self._comments[comment_id] = comment.evolve(
            likes=[like for like in comment.likes if like.user_id != user_id],
            like_count=max(0, comment.like_count - 1),
        )
        return True

    async def add_flag(self, comment_id: CommentId, flag: Flag) -> Optional[int]:
        """Add a flag unless the user already flagged the comment."""
        comment = self._require(comment_id)
        if comment.has_flag_from(flag.user_id):
            return None
        updated = comment.evolve(flags=[*comment.flags, flag])
        self._comments[comment_id] = updated
        return updated.flag_count

    async def update_content(
        self,
        comment_id: CommentId,
        content: str,
        mentions: Sequence[UserId],
        edited_at: datetime,
    ) -> Optional[Comment]:
        """Replace content, appending the previous text to the history."""
        comment = self._comments.get(comment_id)
        if comment is None or comment.is_deleted:
            return None
        updated = comment.evolve(
            content=content,
            mentions=list(mentions),
            is_edited=True,
            edit_history=[
                *comment.edit_history,
                EditRecord(content=comment.content, edited_at=edited_at),
            ],
            updated_at=edited_at,
        )
        self._comments[comment_id] = updated
        return updated

    async def mark_deleted(
        self, comment_id: CommentId, placeholder: str, deleted_at: datetime
    ) -> Optional[Comment]:
        """Soft-delete a live comment."""
        comment = self._comments.get(comment_id)
        if comment is None or comment.is_deleted:
            return None
        deleted = comment.evolve(
            is_deleted=True,
            deleted_at=deleted_at,
            content=placeholder,
            updated_at=deleted_at,
        )
        self._comments[comment_id] = deleted
        return deleted

    async def transition_status(
        self,
        comment_id: CommentId,
        expected: Iterable[CommentStatus],
        status: CommentStatus,
        notes: Optional[str] = None,
    ) -> Optional[Comment]:
        """Set status if the current status is expected."""
        comment = self._comments.get(comment_id)
        if comment is None or comment.status not in set(expected):
            return None
        changes: dict = {"status": status}
        if notes is not None:
            changes["moderation_notes"] = notes
        updated = comment.evolve(**changes)
        self._comments[comment_id] = updated
        return updated
