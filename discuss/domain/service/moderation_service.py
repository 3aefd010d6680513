"""Moderation state machine for comment status."""

import logfire

from discuss.config import CommentSettings
from discuss.domain.error import ConflictError, ForbiddenError, InvalidOperationError, NotFoundError
from discuss.domain.model.comment import Comment
from discuss.domain.repository import CommentRepository
from discuss.domain.value import CommentId, CommentStatus, UserId

from .base import Service

# Transitions an administrator may perform. "flagged" is also entered
# automatically once a comment collects enough distinct-user flags.
ADMIN_TRANSITIONS: dict[CommentStatus, frozenset[CommentStatus]] = {
    CommentStatus.ACTIVE: frozenset({CommentStatus.FLAGGED}),
    CommentStatus.FLAGGED: frozenset(
        {CommentStatus.HIDDEN, CommentStatus.SPAM, CommentStatus.ACTIVE}
    ),
    CommentStatus.HIDDEN: frozenset({CommentStatus.SPAM, CommentStatus.ACTIVE}),
    CommentStatus.SPAM: frozenset({CommentStatus.HIDDEN, CommentStatus.ACTIVE}),
}


def can_transition(current: CommentStatus, new: CommentStatus) -> bool:
    """Check whether an administrator may move a comment between statuses."""
    return new in ADMIN_TRANSITIONS[current]


class ModerationService(Service):
    """Owns every change to a comment's ``status`` field.

    Soft deletion is orthogonal: a deleted comment keeps its last status.
    Whenever a live reply enters or leaves ``active``, the parent's
    reply count moves with it.
    """

    def __init__(
        self, comment_repository: CommentRepository, settings: CommentSettings
    ) -> None:
        """Initialize moderation service.

        Args:
            comment_repository: Comment repository
            settings: Comment engine rules (flag threshold)
        """
        self.comment_repository = comment_repository
        self.settings = settings

    async def apply_flag_threshold(self, comment_id: CommentId, flag_count: int) -> Comment | None:
        """Move an active comment to ``flagged`` when a flag hits the threshold.

        Only the flag that brings the count exactly to the threshold
        escalates, so a comment an administrator has reverted to active is
        not re-flagged by later reports.

        Args:
            comment_id: Flagged comment
            flag_count: Flag count right after the new flag was stored

        Returns:
            The flagged comment if the transition happened, None otherwise
        """
        if flag_count != self.settings.flag_threshold:
            return None

        with logfire.span(
            "moderation_service.apply_flag_threshold",
            comment_id=str(comment_id),
            flag_count=flag_count,
        ):
            flagged = await self.comment_repository.transition_status(
                comment_id, {CommentStatus.ACTIVE}, CommentStatus.FLAGGED
            )
            if flagged is None:
                logfire.info(
                    "Flag threshold reached on non-active comment",
                    comment_id=str(comment_id),
                )
                return None

            await self._sync_parent_reply_count(CommentStatus.ACTIVE, flagged)
            logfire.warn(
                "Comment auto-flagged",
                comment_id=str(comment_id),
                threshold=self.settings.flag_threshold,
            )
            return flagged

    async def moderate(
        self,
        comment_id: CommentId,
        moderator_id: UserId,
        is_admin: bool,
        status: CommentStatus,
        notes: str | None = None,
    ) -> Comment:
        """Apply an administrative status change.

        Args:
            comment_id: Comment to moderate
            moderator_id: User performing the change
            is_admin: Whether the user is an administrator
            status: Requested status
            notes: Optional moderation notes

        Returns:
            Updated comment

        Raises:
            ForbiddenError: If the user is not an administrator
            NotFoundError: If the comment does not exist
            InvalidOperationError: If the transition is not allowed
            ConflictError: If the status changed while the request ran
        """
        with logfire.span(
            "moderation_service.moderate",
            comment_id=str(comment_id),
            moderator_id=str(moderator_id),
            status=status.value,
        ):
            if not is_admin:
                logfire.warn(
                    "Non-admin moderation attempt",
                    comment_id=str(comment_id),
                    user_id=str(moderator_id),
                )
                raise ForbiddenError("moderate", str(comment_id), str(moderator_id))

            comment = await self.comment_repository.find_by_id(comment_id)
            if comment is None:
                raise NotFoundError("Comment", str(comment_id))

            current = comment.status
            if current != status and not can_transition(current, status):
                raise InvalidOperationError(
                    f"Cannot move comment from {current.value} to {status.value}"
                )

            updated = await self.comment_repository.transition_status(
                comment_id, {current}, status, notes
            )
            if updated is None:
                raise ConflictError(f"Status of comment {comment_id} changed concurrently")

            await self._sync_parent_reply_count(current, updated)
            logfire.info(
                "Comment moderated",
                comment_id=str(comment_id),
                from_status=current.value,
                to_status=status.value,
            )
            return updated

    async def _sync_parent_reply_count(
        self, previous: CommentStatus, updated: Comment
    ) -> None:
        """Keep the parent's reply count in step with a status change."""
        if updated.parent_id is None or updated.is_deleted:
            return

        was_active = previous == CommentStatus.ACTIVE
        is_active = updated.status == CommentStatus.ACTIVE
        if was_active == is_active:
            return

        await self.comment_repository.adjust_reply_count(
            updated.parent_id, 1 if is_active else -1
        )
