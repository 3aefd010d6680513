"""Comment repository interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Optional

from discuss.domain.model.comment import Comment
from discuss.domain.value import CommentId, CommentStatus, CommentTarget, Flag, UserId


class CommentRepository(ABC):
    """Repository for Comment entity.

    Defines the contract for comment persistence operations.
    Implementations live in the infrastructure layer.

    Listing methods return only visible comments: not soft-deleted and with
    status ``active``. Aggregate fields are only ever changed through the
    atomic primitives below, never by saving a previously read snapshot.
    """

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID, including soft-deleted ones.

        Args:
            comment_id: The comment's unique identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Insert a new comment.

        Args:
            comment: The comment to insert

        Returns:
            The stored comment

        Raises:
            ConflictError: If a comment with the same id already exists
        """
        pass

    @abstractmethod
    async def find_roots(
        self,
        target: CommentTarget,
        offset: int = 0,
        limit: int = 20,
        newest_first: bool = True,
    ) -> list[Comment]:
        """Find visible root comments attached to a target.

        Args:
            target: Idea or domain the comments hang off
            offset: Number of comments to skip
            limit: Maximum number of comments to return
            newest_first: Sort by created_at descending when True

        Returns:
            Page of root comments
        """
        pass

    @abstractmethod
    async def count_roots(self, target: CommentTarget) -> int:
        """Count visible root comments attached to a target.

        Replies are never counted here.
        """
        pass

    @abstractmethod
    async def find_replies(
        self,
        parent_id: CommentId,
        offset: int = 0,
        limit: int = 10,
        newest_first: bool = False,
    ) -> list[Comment]:
        """Find a page of visible direct replies to a comment."""
        pass

    @abstractmethod
    async def count_replies(self, parent_id: CommentId) -> int:
        """Count visible direct replies to a comment."""
        pass

    @abstractmethod
    async def find_reply_previews(
        self,
        parent_ids: Sequence[CommentId],
        limit: int,
        newest_first: bool = False,
    ) -> dict[CommentId, list[Comment]]:
        """Find the first ``limit`` visible replies of each parent.

        Args:
            parent_ids: Parents to look up
            limit: Maximum replies per parent
            newest_first: Sort replies by created_at descending when True

        Returns:
            Mapping of parent id to its replies; parents without replies map
            to an empty list
        """
        pass

    @abstractmethod
    async def find_children(self, parent_ids: Iterable[CommentId]) -> list[Comment]:
        """Find all visible direct children of the given parents, oldest first."""
        pass

    @abstractmethod
    async def find_by_author(
        self,
        author_id: UserId,
        offset: int = 0,
        limit: int = 20,
    ) -> list[Comment]:
        """Find visible comments by an author, newest first."""
        pass

    @abstractmethod
    async def count_by_author(self, author_id: UserId) -> int:
        """Count visible comments by an author."""
        pass

    @abstractmethod
    async def search(
        self,
        text: str,
        target: Optional[CommentTarget] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> list[Comment]:
        """Find visible comments whose content contains ``text``.

        Matching is case-insensitive and literal, newest first.
        """
        pass

    @abstractmethod
    async def adjust_reply_count(self, comment_id: CommentId, delta: int) -> None:
        """Atomically add ``delta`` to a comment's reply count (minimum 0).

        Raises:
            NotFoundError: If the comment does not exist
        """
        pass

    @abstractmethod
    async def add_like(
        self, comment_id: CommentId, user_id: UserId, liked_at: datetime
    ) -> bool:
        """Add a user's like and bump like_count in one atomic step.

        Returns:
            True if the like was added, False if the user already liked it
        """
        pass

    @abstractmethod
    async def remove_like(self, comment_id: CommentId, user_id: UserId) -> bool:
        """Remove a user's like and drop like_count in one atomic step.

        Returns:
            True if a like was removed, False if there was none
        """
        pass

    @abstractmethod
    async def add_flag(self, comment_id: CommentId, flag: Flag) -> Optional[int]:
        """Add a flag unless the same user already flagged the comment.

        Returns:
            The comment's flag count after the insert, or None when the user
            had already flagged it
        """
        pass

    @abstractmethod
    async def update_content(
        self,
        comment_id: CommentId,
        content: str,
        mentions: Sequence[UserId],
        edited_at: datetime,
    ) -> Optional[Comment]:
        """Replace a live comment's content, recording the replaced text.

        The content being overwritten is appended to the edit history in the
        same atomic step, so concurrent edits never lose a version.

        Returns:
            Updated comment, or None if it does not exist or is deleted
        """
        pass

    @abstractmethod
    async def mark_deleted(
        self, comment_id: CommentId, placeholder: str, deleted_at: datetime
    ) -> Optional[Comment]:
        """Soft-delete a live comment.

        Returns:
            Deleted comment, or None if it does not exist or was already deleted
        """
        pass

    @abstractmethod
    async def transition_status(
        self,
        comment_id: CommentId,
        expected: Iterable[CommentStatus],
        status: CommentStatus,
        notes: Optional[str] = None,
    ) -> Optional[Comment]:
        """Set status if the current status is one of ``expected``.

        Args:
            comment_id: The comment ID
            expected: Statuses the comment must currently be in
            status: New status
            notes: Moderation notes to record; None keeps the existing notes

        Returns:
            Updated comment, or None if the comment is missing or its status
            was not in ``expected``
        """
        pass
