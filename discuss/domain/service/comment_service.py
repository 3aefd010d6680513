"""Comment domain service."""

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import logfire

from discuss.config import CommentSettings
from discuss.domain.error import (
    ContentDeletedError,
    EditWindowExpiredError,
    ForbiddenError,
    InvalidOperationError,
    NotFoundError,
    ValidationError,
)
from discuss.domain.model.comment import Comment
from discuss.domain.repository import CommentRepository
from discuss.domain.value import (
    Attachment,
    CommentId,
    CommentStatus,
    CommentTarget,
    Flag,
    FlagReason,
    TargetKind,
    UserId,
)

from .base import Service
from .mention_service import MentionService
from .moderation_service import ModerationService


class CommentService(Service):
    """Domain service for comment mutations.

    Every aggregate change (reply count, likes, flags) goes through an
    atomic store primitive. Snapshots read earlier in a call are only used
    for validation, never written back.
    """

    def __init__(
        self,
        comment_repository: CommentRepository,
        mention_service: MentionService,
        moderation_service: ModerationService,
        settings: CommentSettings,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            mention_service: Resolves @mentions in content
            moderation_service: Status state machine
            settings: Comment engine rules
        """
        self.comment_repository = comment_repository
        self.mention_service = mention_service
        self.moderation_service = moderation_service
        self.settings = settings

    def validate_content(self, content: str) -> str:
        """Normalize and validate comment text.

        Args:
            content: Raw text from the client

        Returns:
            Trimmed text

        Raises:
            ValidationError: If the text is empty or too long
        """
        text = content.strip()
        if not text:
            raise ValidationError("Comment content is required")
        if len(text) > self.settings.max_content_length:
            raise ValidationError(
                f"Comment content must be at most {self.settings.max_content_length} characters"
            )
        return text

    async def get_comment_by_id(self, comment_id: CommentId) -> Comment | None:
        """Get a comment by ID.

        Args:
            comment_id: Comment ID

        Returns:
            Comment if found, None otherwise
        """
        with logfire.span("comment_service.get_comment_by_id", comment_id=str(comment_id)):
            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                logfire.warn("Comment not found", comment_id=str(comment_id))
            return comment

    async def require_comment(self, comment_id: CommentId) -> Comment:
        """Get a comment by ID or raise NotFoundError."""
        comment = await self.get_comment_by_id(comment_id)
        if comment is None:
            raise NotFoundError("Comment", str(comment_id))
        return comment

    async def require_reply_parent(self, parent_id: CommentId) -> Comment:
        """Get a comment that can take replies.

        Raises:
            NotFoundError: If the parent does not exist
            ContentDeletedError: If the parent is soft-deleted
        """
        parent = await self.comment_repository.find_by_id(parent_id)
        if parent is None:
            logfire.error("Parent comment not found", parent_id=str(parent_id))
            raise NotFoundError("Comment", str(parent_id))
        if parent.is_deleted:
            logfire.warn("Reply to deleted comment", parent_id=str(parent_id))
            raise ContentDeletedError("Comment", str(parent_id), "reply to")
        return parent

    async def create_root(
        self,
        target: CommentTarget,
        author_id: UserId,
        content: str,
        attachments: Sequence[Attachment] = (),
    ) -> Comment:
        """Create a root comment on an idea or domain.

        The caller is responsible for confirming the target exists.

        Args:
            target: Idea or domain to attach to
            author_id: Author user ID
            content: Comment text
            attachments: Already stored attachment references

        Returns:
            Created comment

        Raises:
            ValidationError: If the target is a comment or content is invalid
        """
        with logfire.span(
            "comment_service.create_root",
            target_kind=target.kind.value,
            target_id=str(target.id),
            author_id=str(author_id),
        ):
            match target.kind:
                case TargetKind.IDEA | TargetKind.DOMAIN:
                    pass
                case TargetKind.COMMENT:
                    raise ValidationError("Root comments must target an idea or a domain")

            text = self.validate_content(content)
            mentions = await self.mention_service.resolve(text)

            now = datetime.now(UTC)
            comment = Comment(
                id=CommentId(uuid4()),
                content=text,
                author_id=author_id,
                target=target,
                parent_id=None,
                thread_level=0,
                mentions=mentions,
                attachments=list(attachments),
                created_at=now,
                updated_at=now,
            )

            saved = await self.comment_repository.save(comment)
            logfire.info(
                "Root comment created",
                comment_id=str(saved.id),
                target_kind=target.kind.value,
                target_id=str(target.id),
                mentions=len(mentions),
            )
            return saved

    async def create_reply(
        self,
        parent_id: CommentId,
        author_id: UserId,
        content: str,
        attachments: Sequence[Attachment] = (),
    ) -> Comment:
        """Reply to an existing comment.

        Nesting is clamped: a reply to a comment at the maximum thread level
        lands on that same level.

        Args:
            parent_id: Comment being replied to
            author_id: Author user ID
            content: Reply text
            attachments: Already stored attachment references

        Returns:
            Created reply

        Raises:
            NotFoundError: If the parent does not exist
            ContentDeletedError: If the parent is soft-deleted
            ValidationError: If content is invalid
        """
        with logfire.span(
            "comment_service.create_reply",
            parent_id=str(parent_id),
            author_id=str(author_id),
        ):
            parent = await self.require_reply_parent(parent_id)

            text = self.validate_content(content)
            mentions = await self.mention_service.resolve(text)

            now = datetime.now(UTC)
            reply = Comment(
                id=CommentId(uuid4()),
                content=text,
                author_id=author_id,
                target=CommentTarget.comment(parent_id),
                parent_id=parent_id,
                thread_level=min(parent.thread_level + 1, self.settings.max_thread_level),
                mentions=mentions,
                attachments=list(attachments),
                created_at=now,
                updated_at=now,
            )

            saved = await self.comment_repository.save(reply)
            await self.comment_repository.adjust_reply_count(parent_id, 1)

            logfire.info(
                "Reply created",
                comment_id=str(saved.id),
                parent_id=str(parent_id),
                thread_level=saved.thread_level,
            )
            return saved

    async def edit(
        self, comment_id: CommentId, requester_id: UserId, content: str
    ) -> Comment:
        """Edit a comment's content.

        Args:
            comment_id: Comment ID
            requester_id: User requesting the edit
            content: New text

        Returns:
            Updated comment with the previous text in its edit history

        Raises:
            NotFoundError: If the comment does not exist
            ForbiddenError: If the requester is not the author
            ContentDeletedError: If the comment is deleted
            EditWindowExpiredError: If the edit window has closed
            ValidationError: If content is invalid
        """
        with logfire.span(
            "comment_service.edit",
            comment_id=str(comment_id),
            requester_id=str(requester_id),
        ):
            comment = await self.require_comment(comment_id)

            if comment.author_id != requester_id:
                logfire.warn(
                    "Unauthorized comment edit attempt",
                    comment_id=str(comment_id),
                    user_id=str(requester_id),
                )
                raise ForbiddenError("edit", str(comment_id), str(requester_id))

            if comment.is_deleted:
                raise ContentDeletedError("Comment", str(comment_id), "edit")

            now = datetime.now(UTC)
            window = timedelta(hours=self.settings.edit_window_hours)
            if now - comment.created_at > window:
                raise EditWindowExpiredError(str(comment_id), self.settings.edit_window_hours)

            text = self.validate_content(content)
            mentions = await self.mention_service.resolve(text)

            updated = await self.comment_repository.update_content(
                comment_id, text, mentions, now
            )
            if updated is None:
                # Deleted between the read and the write
                raise ContentDeletedError("Comment", str(comment_id), "edit")

            logfire.info(
                "Comment edited",
                comment_id=str(comment_id),
                revisions=len(updated.edit_history),
            )
            return updated

    async def soft_delete(
        self, comment_id: CommentId, requester_id: UserId, is_admin: bool = False
    ) -> tuple[Comment, bool]:
        """Soft-delete a comment, keeping its place in the tree.

        Deleting an already deleted comment is a no-op, so retries are safe.

        Args:
            comment_id: Comment ID
            requester_id: User requesting the deletion
            is_admin: Whether the requester is an administrator

        Returns:
            The deleted comment and whether this call performed the deletion

        Raises:
            NotFoundError: If the comment does not exist
            ForbiddenError: If the requester is neither author nor admin
        """
        with logfire.span(
            "comment_service.soft_delete",
            comment_id=str(comment_id),
            requester_id=str(requester_id),
            is_admin=is_admin,
        ):
            comment = await self.require_comment(comment_id)

            if comment.author_id != requester_id and not is_admin:
                logfire.warn(
                    "Unauthorized comment delete attempt",
                    comment_id=str(comment_id),
                    user_id=str(requester_id),
                )
                raise ForbiddenError("delete", str(comment_id), str(requester_id))

            if comment.is_deleted:
                logfire.info("Comment already deleted", comment_id=str(comment_id))
                return comment, False

            deleted = await self.comment_repository.mark_deleted(
                comment_id, self.settings.deleted_placeholder, datetime.now(UTC)
            )
            if deleted is None:
                # A concurrent request deleted it first
                return await self.require_comment(comment_id), False

            if deleted.parent_id is not None and deleted.status == CommentStatus.ACTIVE:
                await self.comment_repository.adjust_reply_count(deleted.parent_id, -1)

            logfire.info(
                "Comment deleted",
                comment_id=str(comment_id),
                by_admin=comment.author_id != requester_id,
            )
            return deleted, True

    async def toggle_like(
        self, comment_id: CommentId, user_id: UserId
    ) -> tuple[Comment, bool]:
        """Like a comment, or remove the like if the user already liked it.

        Calling this twice in a row restores the original state.

        Args:
            comment_id: Comment ID
            user_id: User toggling the like

        Returns:
            The updated comment and whether the user now likes it

        Raises:
            NotFoundError: If the comment does not exist
            ContentDeletedError: If the comment is deleted
        """
        with logfire.span(
            "comment_service.toggle_like",
            comment_id=str(comment_id),
            user_id=str(user_id),
        ):
            comment = await self.require_comment(comment_id)
            if comment.is_deleted:
                raise ContentDeletedError("Comment", str(comment_id), "like")

            if await self.comment_repository.remove_like(comment_id, user_id):
                is_liked = False
            else:
                # False here means a concurrent request from the same user
                # already added the like; either way it is liked now
                await self.comment_repository.add_like(comment_id, user_id, datetime.now(UTC))
                is_liked = True

            updated = await self.require_comment(comment_id)
            logfire.info(
                "Comment like toggled",
                comment_id=str(comment_id),
                is_liked=is_liked,
                like_count=updated.like_count,
            )
            return updated, is_liked

    async def add_flag(
        self,
        comment_id: CommentId,
        user_id: UserId,
        reason: FlagReason,
        description: str | None = None,
    ) -> Comment:
        """Report a comment.

        A second flag from the same user is ignored and the first reason is
        kept. The flag that brings the count to the threshold moves the
        comment to ``flagged``.

        Args:
            comment_id: Comment ID
            user_id: Reporting user
            reason: Flag reason
            description: Optional free text

        Returns:
            The comment after the flag was applied

        Raises:
            NotFoundError: If the comment does not exist
            InvalidOperationError: If users flag their own comment
            ContentDeletedError: If the comment is deleted
        """
        with logfire.span(
            "comment_service.add_flag",
            comment_id=str(comment_id),
            user_id=str(user_id),
            reason=reason.value,
        ):
            comment = await self.require_comment(comment_id)

            if comment.author_id == user_id:
                raise InvalidOperationError("You cannot flag your own comment")
            if comment.is_deleted:
                raise ContentDeletedError("Comment", str(comment_id), "flag")
            if comment.has_flag_from(user_id):
                logfire.info("Duplicate flag ignored", comment_id=str(comment_id))
                return comment

            flag = Flag(
                user_id=user_id,
                reason=reason,
                description=(description or "").strip() or None,
                flagged_at=datetime.now(UTC),
            )
            flag_count = await self.comment_repository.add_flag(comment_id, flag)
            if flag_count is None:
                logfire.info("Duplicate flag ignored", comment_id=str(comment_id))
                return await self.require_comment(comment_id)

            await self.moderation_service.apply_flag_threshold(comment_id, flag_count)

            logfire.info(
                "Comment flagged",
                comment_id=str(comment_id),
                flag_count=flag_count,
            )
            return await self.require_comment(comment_id)
