"""Search comments use case."""

from pydantic import BaseModel, Field

from discuss.application.usecase.base import BaseUseCase, parse_uuid
from discuss.domain.error import ValidationError
from discuss.domain.service import ThreadService
from discuss.domain.value import CommentTarget, TargetKind, UserId

from .view import CommentItem


class SearchCommentsRequest(BaseModel):
    """Search comments request."""

    query: str
    target_kind: TargetKind | None = None  # Restrict to one idea or domain
    target_id: str | None = None
    page: int = Field(default=1, ge=1)
    page_size: int | None = Field(default=None, ge=1)
    viewer_id: str | None = None


class SearchCommentsResponse(BaseModel):
    """Search comments response."""

    query: str
    comments: list[CommentItem]


class SearchCommentsUseCase(BaseUseCase[SearchCommentsRequest, SearchCommentsResponse]):
    """Use case for text search over visible comments."""

    def __init__(self, thread_service: ThreadService) -> None:
        self.thread_service = thread_service

    async def execute(self, request: SearchCommentsRequest) -> SearchCommentsResponse:
        target = None
        if request.target_kind is not None:
            if request.target_id is None:
                raise ValidationError("target_id is required with target_kind")
            target = CommentTarget(kind=request.target_kind, id=parse_uuid(request.target_id, "target_id"))

        viewer_id = UserId(parse_uuid(request.viewer_id, "viewer_id")) if request.viewer_id else None
        comments = await self.thread_service.search(
            request.query,
            target=target,
            page=request.page,
            page_size=request.page_size,
        )
        return SearchCommentsResponse(
            query=request.query.strip(),
            comments=[CommentItem.from_comment(c, viewer_id) for c in comments],
        )
