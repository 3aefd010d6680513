"""Moderate comment use case."""

from pydantic import BaseModel, Field

from discuss.application.usecase.base import BaseUseCase, parse_uuid
from discuss.domain.service import IdentityDirectory, ModerationService
from discuss.domain.value import CommentId, CommentStatus, UserId


class ModerateCommentRequest(BaseModel):
    """Moderate comment request."""

    comment_id: str  # UUID string
    moderator_id: str
    status: CommentStatus
    notes: str | None = Field(default=None, max_length=2000)


class ModerateCommentResponse(BaseModel):
    """Moderate comment response."""

    comment_id: str
    status: str
    moderation_notes: str | None


class ModerateCommentUseCase(
    BaseUseCase[ModerateCommentRequest, ModerateCommentResponse]
):
    """Use case for administrators changing a comment's moderation status."""

    def __init__(
        self,
        moderation_service: ModerationService,
        identity_directory: IdentityDirectory,
    ) -> None:
        self.moderation_service = moderation_service
        self.identity_directory = identity_directory

    async def execute(self, request: ModerateCommentRequest) -> ModerateCommentResponse:
        """Execute moderation flow.

        Raises:
            ForbiddenError: If the user is not an administrator
            NotFoundError: If the comment does not exist
            InvalidOperationError: If the transition is not allowed
        """
        moderator_id = UserId(parse_uuid(request.moderator_id, "moderator_id"))
        is_admin = await self.identity_directory.is_admin(moderator_id)

        comment = await self.moderation_service.moderate(
            comment_id=CommentId(parse_uuid(request.comment_id, "comment_id")),
            moderator_id=moderator_id,
            is_admin=is_admin,
            status=request.status,
            notes=request.notes,
        )
        return ModerateCommentResponse(
            comment_id=str(comment.id),
            status=comment.status.value,
            moderation_notes=comment.moderation_notes,
        )
