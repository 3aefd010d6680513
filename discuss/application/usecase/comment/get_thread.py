"""Get thread use case."""

from pydantic import BaseModel

from discuss.application.usecase.base import BaseUseCase, parse_uuid
from discuss.domain.service import ThreadService
from discuss.domain.value import CommentId, UserId

from .view import ThreadNodeItem


class GetThreadRequest(BaseModel):
    """Get thread request."""

    comment_id: str  # UUID string
    viewer_id: str | None = None


class GetThreadResponse(BaseModel):
    """Get thread response."""

    thread: ThreadNodeItem
    node_count: int


class GetThreadUseCase(BaseUseCase[GetThreadRequest, GetThreadResponse]):
    """Use case for expanding a comment with all of its replies."""

    def __init__(self, thread_service: ThreadService) -> None:
        self.thread_service = thread_service

    async def execute(self, request: GetThreadRequest) -> GetThreadResponse:
        viewer_id = UserId(parse_uuid(request.viewer_id, "viewer_id")) if request.viewer_id else None
        root = await self.thread_service.get_full_thread(
            CommentId(parse_uuid(request.comment_id, "comment_id"))
        )
        return GetThreadResponse(
            thread=ThreadNodeItem.from_node(root, viewer_id),
            node_count=root.size(),
        )
