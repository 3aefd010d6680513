"""Comment routes.

Domain errors raised by use cases are translated by the handlers in
``discuss.interface.api.errors``.
"""

from typing import Annotated, Literal

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, File, Form, Query, UploadFile, status
from pydantic import BaseModel, Field

from discuss.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
    FlagCommentRequest,
    FlagCommentResponse,
    FlagCommentUseCase,
    GetCommentsRequest,
    GetCommentsResponse,
    GetCommentsUseCase,
    GetRepliesRequest,
    GetRepliesResponse,
    GetRepliesUseCase,
    GetThreadRequest,
    GetThreadResponse,
    GetThreadUseCase,
    GetUserCommentsRequest,
    GetUserCommentsResponse,
    GetUserCommentsUseCase,
    ModerateCommentRequest,
    ModerateCommentResponse,
    ModerateCommentUseCase,
    SearchCommentsRequest,
    SearchCommentsResponse,
    SearchCommentsUseCase,
    ToggleLikeRequest,
    ToggleLikeResponse,
    ToggleLikeUseCase,
    UpdateCommentRequest,
    UpdateCommentResponse,
    UpdateCommentUseCase,
    UploadedFile,
)
from discuss.domain.value import CommentStatus, FlagReason, TargetKind
from discuss.interface.api.identity import CurrentUserId, ViewerId

router = APIRouter(prefix="/comments", tags=["comments"], route_class=DishkaRoute)

RootTargetKind = Literal["idea", "domain"]


async def _read_uploads(files: list[UploadFile] | None) -> list[UploadedFile]:
    return [
        UploadedFile(
            filename=f.filename or "upload",
            content_type=f.content_type,
            data=await f.read(),
        )
        for f in files or []
    ]


# Reads


@router.get("/search", response_model=SearchCommentsResponse)
async def search_comments(
    use_case: FromDishka[SearchCommentsUseCase],
    viewer_id: ViewerId,
    q: Annotated[str, Query(min_length=1)],
    target_kind: RootTargetKind | None = None,
    target_id: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> SearchCommentsResponse:
    """Search visible comments by text, newest first."""
    return await use_case.execute(
        SearchCommentsRequest(
            query=q,
            target_kind=TargetKind(target_kind) if target_kind else None,
            target_id=target_id,
            page=page,
            page_size=limit,
            viewer_id=viewer_id,
        )
    )


@router.get("/users/{author_id}", response_model=GetUserCommentsResponse)
async def get_user_comments(
    author_id: str,
    use_case: FromDishka[GetUserCommentsUseCase],
    viewer_id: ViewerId,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> GetUserCommentsResponse:
    """List an author's visible comments."""
    return await use_case.execute(
        GetUserCommentsRequest(
            author_id=author_id, page=page, page_size=limit, viewer_id=viewer_id
        )
    )


@router.get("/targets/{target_kind}/{target_id}", response_model=GetCommentsResponse)
async def get_comments(
    target_kind: RootTargetKind,
    target_id: str,
    use_case: FromDishka[GetCommentsUseCase],
    viewer_id: ViewerId,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
    reply_limit: Annotated[int | None, Query(ge=0)] = None,
    sort: Literal["newest", "oldest"] = "newest",
) -> GetCommentsResponse:
    """Page through root comments on an idea or domain with reply previews."""
    return await use_case.execute(
        GetCommentsRequest(
            target_kind=TargetKind(target_kind),
            target_id=target_id,
            page=page,
            page_size=limit,
            reply_page_size=reply_limit,
            newest_first=sort == "newest",
            viewer_id=viewer_id,
        )
    )


@router.get("/{comment_id}/replies", response_model=GetRepliesResponse)
async def get_replies(
    comment_id: str,
    use_case: FromDishka[GetRepliesUseCase],
    viewer_id: ViewerId,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> GetRepliesResponse:
    """Load more direct replies of a comment, oldest first."""
    return await use_case.execute(
        GetRepliesRequest(
            comment_id=comment_id, page=page, page_size=limit, viewer_id=viewer_id
        )
    )


@router.get("/{comment_id}/thread", response_model=GetThreadResponse)
async def get_thread(
    comment_id: str,
    use_case: FromDishka[GetThreadUseCase],
    viewer_id: ViewerId,
) -> GetThreadResponse:
    """Expand a comment with all of its visible replies."""
    return await use_case.execute(
        GetThreadRequest(comment_id=comment_id, viewer_id=viewer_id)
    )


# Mutations


@router.post(
    "/targets/{target_kind}/{target_id}",
    response_model=CreateCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    target_kind: RootTargetKind,
    target_id: str,
    use_case: FromDishka[CreateCommentUseCase],
    user_id: CurrentUserId,
    content: Annotated[str, Form()],
    attachments: Annotated[list[UploadFile] | None, File()] = None,
) -> CreateCommentResponse:
    """Post a root comment on an idea or domain."""
    return await use_case.execute(
        CreateCommentRequest(
            author_id=user_id,
            content=content,
            target_kind=TargetKind(target_kind),
            target_id=target_id,
            attachments=await _read_uploads(attachments),
        )
    )


@router.post(
    "/{comment_id}/replies",
    response_model=CreateCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reply(
    comment_id: str,
    use_case: FromDishka[CreateCommentUseCase],
    user_id: CurrentUserId,
    content: Annotated[str, Form()],
    attachments: Annotated[list[UploadFile] | None, File()] = None,
) -> CreateCommentResponse:
    """Reply to a comment."""
    return await use_case.execute(
        CreateCommentRequest(
            author_id=user_id,
            content=content,
            parent_id=comment_id,
            attachments=await _read_uploads(attachments),
        )
    )


class UpdateCommentAPIRequest(BaseModel):
    """API request for editing a comment."""

    content: str = Field(min_length=1)


@router.patch("/{comment_id}", response_model=UpdateCommentResponse)
async def update_comment(
    comment_id: str,
    request: UpdateCommentAPIRequest,
    use_case: FromDishka[UpdateCommentUseCase],
    user_id: CurrentUserId,
) -> UpdateCommentResponse:
    """Edit a comment. Only the author may edit, within the edit window."""
    return await use_case.execute(
        UpdateCommentRequest(
            comment_id=comment_id, user_id=user_id, content=request.content
        )
    )


@router.delete("/{comment_id}", response_model=DeleteCommentResponse)
async def delete_comment(
    comment_id: str,
    use_case: FromDishka[DeleteCommentUseCase],
    user_id: CurrentUserId,
) -> DeleteCommentResponse:
    """Soft-delete a comment (author or administrator)."""
    return await use_case.execute(
        DeleteCommentRequest(comment_id=comment_id, user_id=user_id)
    )


@router.post("/{comment_id}/like", response_model=ToggleLikeResponse)
async def toggle_like(
    comment_id: str,
    use_case: FromDishka[ToggleLikeUseCase],
    user_id: CurrentUserId,
) -> ToggleLikeResponse:
    """Like a comment, or remove an existing like."""
    return await use_case.execute(
        ToggleLikeRequest(comment_id=comment_id, user_id=user_id)
    )


class FlagCommentAPIRequest(BaseModel):
    """API request for flagging a comment."""

    reason: FlagReason
    description: str | None = Field(default=None, max_length=1000)


@router.post("/{comment_id}/flag", response_model=FlagCommentResponse)
async def flag_comment(
    comment_id: str,
    request: FlagCommentAPIRequest,
    use_case: FromDishka[FlagCommentUseCase],
    user_id: CurrentUserId,
) -> FlagCommentResponse:
    """Report a comment."""
    return await use_case.execute(
        FlagCommentRequest(
            comment_id=comment_id,
            user_id=user_id,
            reason=request.reason,
            description=request.description,
        )
    )


class ModerateCommentAPIRequest(BaseModel):
    """API request for an administrative status change."""

    status: CommentStatus
    notes: str | None = Field(default=None, max_length=2000)


@router.post("/{comment_id}/moderate", response_model=ModerateCommentResponse)
async def moderate_comment(
    comment_id: str,
    request: ModerateCommentAPIRequest,
    use_case: FromDishka[ModerateCommentUseCase],
    user_id: CurrentUserId,
) -> ModerateCommentResponse:
    """Change a comment's moderation status (administrators only)."""
    return await use_case.execute(
        ModerateCommentRequest(
            comment_id=comment_id,
            moderator_id=user_id,
            status=request.status,
            notes=request.notes,
        )
    )
