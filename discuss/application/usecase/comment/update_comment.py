"""Update comment use case."""

from pydantic import BaseModel

from discuss.application.usecase.base import BaseUseCase, parse_uuid
from discuss.domain.service import CommentService
from discuss.domain.value import CommentId, UserId

from .view import CommentItem


class UpdateCommentRequest(BaseModel):
    """Update comment request."""

    comment_id: str  # UUID string
    user_id: str  # Current user ID (must be author)
    content: str  # New content (required, cannot be empty)


class UpdateCommentResponse(BaseModel):
    """Update comment response."""

    comment: CommentItem


class UpdateCommentUseCase(BaseUseCase[UpdateCommentRequest, UpdateCommentResponse]):
    """Use case for an author editing their own comment."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: UpdateCommentRequest) -> UpdateCommentResponse:
        """Execute update comment flow.

        Raises:
            NotFoundError: If the comment does not exist
            ForbiddenError: If the user is not the author
            ContentDeletedError: If the comment is deleted
            EditWindowExpiredError: If the comment is too old to edit
            ValidationError: If the new content is invalid
        """
        user_id = UserId(parse_uuid(request.user_id, "user_id"))
        comment = await self.comment_service.edit(
            comment_id=CommentId(parse_uuid(request.comment_id, "comment_id")),
            requester_id=user_id,
            content=request.content,
        )
        return UpdateCommentResponse(comment=CommentItem.from_comment(comment, user_id))
