"""Flag comment use case."""

from pydantic import BaseModel, Field

from discuss.application.usecase.base import BaseUseCase, parse_uuid
from discuss.domain.service import CommentService
from discuss.domain.value import CommentId, FlagReason, UserId


class FlagCommentRequest(BaseModel):
    """Flag comment request."""

    comment_id: str  # UUID string
    user_id: str  # Reporting user
    reason: FlagReason
    description: str | None = Field(default=None, max_length=1000)


class FlagCommentResponse(BaseModel):
    """Flag comment response."""

    comment_id: str
    flag_count: int
    status: str


class FlagCommentUseCase(BaseUseCase[FlagCommentRequest, FlagCommentResponse]):
    """Use case for reporting a comment.

    Reports from distinct users accumulate until the moderation threshold
    moves the comment out of public listings.
    """

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: FlagCommentRequest) -> FlagCommentResponse:
        """Execute flag comment flow.

        Raises:
            NotFoundError: If the comment does not exist
            InvalidOperationError: If users flag their own or a deleted comment
        """
        comment = await self.comment_service.add_flag(
            comment_id=CommentId(parse_uuid(request.comment_id, "comment_id")),
            user_id=UserId(parse_uuid(request.user_id, "user_id")),
            reason=request.reason,
            description=request.description,
        )
        return FlagCommentResponse(
            comment_id=str(comment.id),
            flag_count=comment.flag_count,
            status=comment.status.value,
        )
