"""Create comment use case."""

import logfire
from pydantic import BaseModel, Field

from discuss.adapter.error import AdapterError
from discuss.application.usecase.base import BaseUseCase, parse_uuid
from discuss.config import StorageSettings
from discuss.domain.error import NotFoundError, ValidationError
from discuss.domain.model import Comment
from discuss.domain.repository import UnitOfWork
from discuss.domain.service import AttachmentStorage, CommentService, ParentContentGateway
from discuss.domain.value import (
    Attachment,
    CommentId,
    CommentTarget,
    IdeaId,
    TargetKind,
    UserId,
)

from .view import CommentItem


class UploadedFile(BaseModel):
    """File received with a new comment."""

    filename: str = Field(min_length=1, max_length=255)
    content_type: str | None = None
    data: bytes


class CreateCommentRequest(BaseModel):
    """Create comment request.

    Root comments name their idea or domain; replies name the parent
    comment and inherit its discussion.
    """

    author_id: str  # User ID from authenticated user
    content: str
    target_kind: TargetKind | None = None  # idea or domain for root comments
    target_id: str | None = None  # UUID string
    parent_id: str | None = None  # Parent comment ID for replies
    attachments: list[UploadedFile] = Field(default_factory=list)


class CreateCommentResponse(BaseModel):
    """Create comment response."""

    comment: CommentItem
    is_reply: bool


class CreateCommentUseCase(BaseUseCase[CreateCommentRequest, CreateCommentResponse]):
    """Use case for commenting on an idea or domain, or replying to a comment."""

    def __init__(
        self,
        comment_service: CommentService,
        content_gateway: ParentContentGateway,
        attachment_storage: AttachmentStorage,
        storage_settings: StorageSettings,
        unit_of_work: UnitOfWork,
    ) -> None:
        """Initialize create comment use case.

        Args:
            comment_service: Comment domain service
            content_gateway: Ideas and domains owned by the platform
            attachment_storage: Where uploaded files go
            storage_settings: Attachment limits
            unit_of_work: Commits the comment before the idea counter moves
        """
        self.comment_service = comment_service
        self.content_gateway = content_gateway
        self.attachment_storage = attachment_storage
        self.storage_settings = storage_settings
        self.unit_of_work = unit_of_work

    def _check_uploads(self, uploads: list[UploadedFile]) -> None:
        if len(uploads) > self.storage_settings.max_attachments:
            raise ValidationError(
                f"At most {self.storage_settings.max_attachments} attachments are allowed"
            )
        for upload in uploads:
            if len(upload.data) > self.storage_settings.max_attachment_bytes:
                raise ValidationError(f"Attachment {upload.filename} is too large")

    async def _store_uploads(self, uploads: list[UploadedFile]) -> list[Attachment]:
        return [
            await self.attachment_storage.store(u.filename, u.content_type, u.data)
            for u in uploads
        ]

    async def execute(self, request: CreateCommentRequest) -> CreateCommentResponse:
        """Execute create comment flow.

        Steps:
        1. Validate content and attachment limits
        2. Confirm the parent comment, idea or domain can take the comment
        3. Store attachments and create the comment
        4. For root comments on ideas, commit and bump the idea's comment counter

        Raises:
            ValidationError: If content, target or attachments are invalid
            NotFoundError: If the target or parent does not exist
            ContentDeletedError: If the parent comment is deleted
        """
        author_id = UserId(parse_uuid(request.author_id, "author_id"))
        self.comment_service.validate_content(request.content)
        self._check_uploads(request.attachments)

        if request.parent_id:
            parent_id = CommentId(parse_uuid(request.parent_id, "parent_id"))
            await self.comment_service.require_reply_parent(parent_id)

            attachments = await self._store_uploads(request.attachments)
            reply = await self.comment_service.create_reply(
                parent_id=parent_id,
                author_id=author_id,
                content=request.content,
                attachments=attachments,
            )
            return CreateCommentResponse(
                comment=CommentItem.from_comment(reply, author_id), is_reply=True
            )

        target = self._root_target(request)
        if not await self.content_gateway.exists(target.kind, target.id):
            raise NotFoundError(target.kind.value.capitalize(), str(target.id))

        attachments = await self._store_uploads(request.attachments)
        comment = await self.comment_service.create_root(
            target=target,
            author_id=author_id,
            content=request.content,
            attachments=attachments,
        )
        await self._increment_idea_counter(comment)

        return CreateCommentResponse(
            comment=CommentItem.from_comment(comment, author_id), is_reply=False
        )

    @staticmethod
    def _root_target(request: CreateCommentRequest) -> CommentTarget:
        if request.target_kind is None or request.target_id is None:
            raise ValidationError("A target or a parent comment is required")
        match request.target_kind:
            case TargetKind.IDEA:
                return CommentTarget.idea(parse_uuid(request.target_id, "target_id"))
            case TargetKind.DOMAIN:
                return CommentTarget.domain(parse_uuid(request.target_id, "target_id"))
            case _:
                raise ValidationError("Invalid target type")

    async def _increment_idea_counter(self, comment: Comment) -> None:
        if comment.target.kind != TargetKind.IDEA:
            return
        await self.unit_of_work.commit()
        try:
            await self.content_gateway.increment_comment_count(IdeaId(comment.target.id))
        except AdapterError as e:
            # The comment is stored; the counter is best effort
            logfire.error(
                "Idea comment counter increment failed",
                idea_id=str(comment.target.id),
                comment_id=str(comment.id),
                error=str(e),
            )
