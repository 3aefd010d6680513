"""Get replies use case."""

from pydantic import BaseModel, Field

from discuss.application.usecase.base import BaseUseCase, parse_uuid
from discuss.domain.service import ThreadService
from discuss.domain.value import CommentId, UserId

from .view import CommentItem, PaginationItem


class GetRepliesRequest(BaseModel):
    """Get replies request."""

    comment_id: str  # Parent comment UUID string
    page: int = Field(default=1, ge=1)
    page_size: int | None = Field(default=None, ge=1)
    newest_first: bool = False
    viewer_id: str | None = None


class GetRepliesResponse(BaseModel):
    """Get replies response."""

    parent: CommentItem
    replies: list[CommentItem]
    pagination: PaginationItem


class GetRepliesUseCase(BaseUseCase[GetRepliesRequest, GetRepliesResponse]):
    """Use case for loading more direct replies of a comment."""

    def __init__(self, thread_service: ThreadService) -> None:
        self.thread_service = thread_service

    async def execute(self, request: GetRepliesRequest) -> GetRepliesResponse:
        viewer_id = UserId(parse_uuid(request.viewer_id, "viewer_id")) if request.viewer_id else None
        parent, replies, pagination = await self.thread_service.get_replies(
            CommentId(parse_uuid(request.comment_id, "comment_id")),
            page=request.page,
            page_size=request.page_size,
            newest_first=request.newest_first,
        )
        return GetRepliesResponse(
            parent=CommentItem.from_comment(parent, viewer_id),
            replies=[CommentItem.from_comment(r, viewer_id) for r in replies],
            pagination=PaginationItem.from_pagination(pagination),
        )
