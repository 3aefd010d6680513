"""Toggle like use case."""

from pydantic import BaseModel

from discuss.application.usecase.base import BaseUseCase, parse_uuid
from discuss.domain.service import CommentService
from discuss.domain.value import CommentId, UserId


class ToggleLikeRequest(BaseModel):
    """Toggle like request."""

    comment_id: str  # UUID string
    user_id: str


class ToggleLikeResponse(BaseModel):
    """Toggle like response."""

    comment_id: str
    is_liked: bool
    like_count: int


class ToggleLikeUseCase(BaseUseCase[ToggleLikeRequest, ToggleLikeResponse]):
    """Use case for liking or unliking a comment."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: ToggleLikeRequest) -> ToggleLikeResponse:
        comment, is_liked = await self.comment_service.toggle_like(
            comment_id=CommentId(parse_uuid(request.comment_id, "comment_id")),
            user_id=UserId(parse_uuid(request.user_id, "user_id")),
        )
        return ToggleLikeResponse(
            comment_id=str(comment.id),
            is_liked=is_liked,
            like_count=comment.like_count,
        )
