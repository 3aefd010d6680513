"""Get comments use case."""

from pydantic import BaseModel, Field

from discuss.application.usecase.base import BaseUseCase, parse_uuid
from discuss.domain.error import ValidationError
from discuss.domain.service import ThreadService
from discuss.domain.value import CommentTarget, TargetKind, UserId

from .view import CommentItem, PaginationItem


class ThreadEntryItem(BaseModel):
    """Root comment with its first replies."""

    comment: CommentItem
    replies: list[CommentItem]
    reply_count: int
    has_more_replies: bool


class GetCommentsRequest(BaseModel):
    """Get comments request."""

    target_kind: TargetKind  # idea or domain
    target_id: str  # UUID string
    page: int = Field(default=1, ge=1)
    page_size: int | None = Field(default=None, ge=1)
    reply_page_size: int | None = Field(default=None, ge=0)
    newest_first: bool = True
    viewer_id: str | None = None  # Authenticated user, for like state


class GetCommentsResponse(BaseModel):
    """Get comments response."""

    target_kind: str
    target_id: str
    comments: list[ThreadEntryItem]
    pagination: PaginationItem


class GetCommentsUseCase(BaseUseCase[GetCommentsRequest, GetCommentsResponse]):
    """Use case for reading the paginated discussion on an idea or domain."""

    def __init__(self, thread_service: ThreadService) -> None:
        """Initialize get comments use case.

        Args:
            thread_service: Thread read service
        """
        self.thread_service = thread_service

    async def execute(self, request: GetCommentsRequest) -> GetCommentsResponse:
        """Execute get comments flow.

        Pagination counts root comments only; each root carries a preview
        of its replies and whether more can be loaded.
        """
        match request.target_kind:
            case TargetKind.IDEA:
                target = CommentTarget.idea(parse_uuid(request.target_id, "target_id"))
            case TargetKind.DOMAIN:
                target = CommentTarget.domain(parse_uuid(request.target_id, "target_id"))
            case _:
                raise ValidationError("Invalid target type")

        viewer_id = UserId(parse_uuid(request.viewer_id, "viewer_id")) if request.viewer_id else None
        page = await self.thread_service.get_thread_page(
            target,
            page=request.page,
            page_size=request.page_size,
            reply_page_size=request.reply_page_size,
            newest_first=request.newest_first,
        )

        return GetCommentsResponse(
            target_kind=target.kind.value,
            target_id=str(target.id),
            comments=[
                ThreadEntryItem(
                    comment=CommentItem.from_comment(entry.comment, viewer_id),
                    replies=[
                        CommentItem.from_comment(reply, viewer_id)
                        for reply in entry.replies
                    ],
                    reply_count=entry.reply_count,
                    has_more_replies=entry.has_more_replies,
                )
                for entry in page.entries
            ],
            pagination=PaginationItem.from_pagination(page.pagination),
        )
