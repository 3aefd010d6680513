"""Get user comments use case."""

from pydantic import BaseModel, Field

from discuss.application.usecase.base import BaseUseCase, parse_uuid
from discuss.domain.service import ThreadService
from discuss.domain.value import UserId

from .view import CommentItem, PaginationItem


class GetUserCommentsRequest(BaseModel):
    """Get user comments request."""

    author_id: str  # UUID string
    page: int = Field(default=1, ge=1)
    page_size: int | None = Field(default=None, ge=1)
    viewer_id: str | None = None


class GetUserCommentsResponse(BaseModel):
    """Get user comments response."""

    author_id: str
    comments: list[CommentItem]
    pagination: PaginationItem


class GetUserCommentsUseCase(
    BaseUseCase[GetUserCommentsRequest, GetUserCommentsResponse]
):
    """Use case for listing an author's visible comments, newest first."""

    def __init__(self, thread_service: ThreadService) -> None:
        self.thread_service = thread_service

    async def execute(self, request: GetUserCommentsRequest) -> GetUserCommentsResponse:
        author_id = UserId(parse_uuid(request.author_id, "author_id"))
        viewer_id = UserId(parse_uuid(request.viewer_id, "viewer_id")) if request.viewer_id else None
        comments, pagination = await self.thread_service.get_user_comments(
            author_id, page=request.page, page_size=request.page_size
        )
        return GetUserCommentsResponse(
            author_id=str(author_id),
            comments=[CommentItem.from_comment(c, viewer_id) for c in comments],
            pagination=PaginationItem.from_pagination(pagination),
        )
