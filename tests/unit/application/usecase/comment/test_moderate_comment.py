"""Unit tests for ModerateCommentUseCase."""

from uuid import uuid4

import pytest

from discuss.application.usecase.comment import (
    ModerateCommentRequest,
    ModerateCommentUseCase,
)
from discuss.domain.error import ForbiddenError, InvalidOperationError
from discuss.domain.repository import CommentRepository
from discuss.domain.service import IdentityDirectory
from discuss.domain.value import CommentStatus, UserId
from tests.conftest import make_root
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestModerateCommentUseCase:
    """Tests for ModerateCommentUseCase."""

    @pytest.mark.asyncio
    async def test_admin_marks_flagged_comment_as_spam(self, unit_env):
        # Arrange
        use_case = await unit_env.get(ModerateCommentUseCase)
        directory = await unit_env.get(IdentityDirectory)
        comment_repo = await unit_env.get(CommentRepository)
        admin_id = directory.add_admin(UserId(uuid4()))
        comment = await comment_repo.save(make_root(status=CommentStatus.FLAGGED))

        # Act
        response = await use_case.execute(
            ModerateCommentRequest(
                comment_id=str(comment.id),
                moderator_id=str(admin_id),
                status=CommentStatus.SPAM,
                notes="Link farm",
            )
        )

        # Assert
        assert response.status == "spam"
        assert response.moderation_notes == "Link farm"

    @pytest.mark.asyncio
    async def test_regular_user_forbidden(self, unit_env):
        use_case = await unit_env.get(ModerateCommentUseCase)
        directory = await unit_env.get(IdentityDirectory)
        comment_repo = await unit_env.get(CommentRepository)
        user_id = directory.add_user("carol", UserId(uuid4()))
        comment = await comment_repo.save(make_root(status=CommentStatus.FLAGGED))

        with pytest.raises(ForbiddenError):
            await use_case.execute(
                ModerateCommentRequest(
                    comment_id=str(comment.id),
                    moderator_id=str(user_id),
                    status=CommentStatus.HIDDEN,
                )
            )

    @pytest.mark.asyncio
    async def test_invalid_transition_rejected(self, unit_env):
        use_case = await unit_env.get(ModerateCommentUseCase)
        directory = await unit_env.get(IdentityDirectory)
        comment_repo = await unit_env.get(CommentRepository)
        admin_id = directory.add_admin(UserId(uuid4()))
        comment = await comment_repo.save(make_root(status=CommentStatus.HIDDEN))

        with pytest.raises(InvalidOperationError):
            await use_case.execute(
                ModerateCommentRequest(
                    comment_id=str(comment.id),
                    moderator_id=str(admin_id),
                    status=CommentStatus.FLAGGED,
                )
            )
