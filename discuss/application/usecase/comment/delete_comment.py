"""Delete comment use case."""

import logfire
from pydantic import BaseModel

from discuss.adapter.error import AdapterError
from discuss.application.usecase.base import BaseUseCase, parse_uuid
from discuss.domain.model import Comment
from discuss.domain.repository import UnitOfWork
from discuss.domain.service import CommentService, IdentityDirectory, ParentContentGateway
from discuss.domain.value import CommentId, IdeaId, TargetKind, UserId


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    comment_id: str  # UUID string
    user_id: str  # Author or administrator


class DeleteCommentResponse(BaseModel):
    """Delete comment response."""

    comment_id: str
    deleted: bool  # False when the comment had already been deleted


class DeleteCommentUseCase(BaseUseCase[DeleteCommentRequest, DeleteCommentResponse]):
    """Use case for soft-deleting a comment.

    The comment keeps its place in the tree with placeholder content so
    replies below it stay attached.
    """

    def __init__(
        self,
        comment_service: CommentService,
        identity_directory: IdentityDirectory,
        content_gateway: ParentContentGateway,
        unit_of_work: UnitOfWork,
    ) -> None:
        """Initialize delete comment use case.

        Args:
            comment_service: Comment domain service
            identity_directory: Role lookups for the requester
            content_gateway: Ideas and domains owned by the platform
            unit_of_work: Commits the deletion before the idea counter moves
        """
        self.comment_service = comment_service
        self.identity_directory = identity_directory
        self.content_gateway = content_gateway
        self.unit_of_work = unit_of_work

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Execute delete comment flow.

        Raises:
            NotFoundError: If the comment does not exist
            ForbiddenError: If the user is neither author nor administrator
        """
        user_id = UserId(parse_uuid(request.user_id, "user_id"))
        is_admin = await self.identity_directory.is_admin(user_id)

        comment, deleted_now = await self.comment_service.soft_delete(
            comment_id=CommentId(parse_uuid(request.comment_id, "comment_id")),
            requester_id=user_id,
            is_admin=is_admin,
        )
        if deleted_now:
            await self._decrement_idea_counter(comment)

        return DeleteCommentResponse(comment_id=str(comment.id), deleted=deleted_now)

    async def _decrement_idea_counter(self, comment: Comment) -> None:
        if not comment.is_root or comment.target.kind != TargetKind.IDEA:
            return
        await self.unit_of_work.commit()
        try:
            await self.content_gateway.decrement_comment_count(IdeaId(comment.target.id))
        except AdapterError as e:
            logfire.error(
                "Idea comment counter decrement failed",
                idea_id=str(comment.target.id),
                comment_id=str(comment.id),
                error=str(e),
            )
