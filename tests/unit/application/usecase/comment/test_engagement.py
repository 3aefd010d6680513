"""Unit tests for the like, flag and edit use cases."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from discuss.application.usecase.comment import (
    FlagCommentRequest,
    FlagCommentUseCase,
    ToggleLikeRequest,
    ToggleLikeUseCase,
    UpdateCommentRequest,
    UpdateCommentUseCase,
)
from discuss.domain.error import EditWindowExpiredError, ForbiddenError, InvalidOperationError
from discuss.domain.repository import CommentRepository
from discuss.domain.value import FlagReason, UserId
from tests.conftest import make_root
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestToggleLikeUseCase:
    """Tests for ToggleLikeUseCase."""

    @pytest.mark.asyncio
    async def test_like_then_unlike(self, unit_env):
        use_case = await unit_env.get(ToggleLikeUseCase)
        comment_repo = await unit_env.get(CommentRepository)
        comment = await comment_repo.save(make_root())
        request = ToggleLikeRequest(comment_id=str(comment.id), user_id=str(uuid4()))

        liked = await use_case.execute(request)
        unliked = await use_case.execute(request)

        assert (liked.is_liked, liked.like_count) == (True, 1)
        assert (unliked.is_liked, unliked.like_count) == (False, 0)


class TestFlagCommentUseCase:
    """Tests for FlagCommentUseCase."""

    @pytest.mark.asyncio
    async def test_fifth_flag_reports_flagged_status(self, unit_env):
        # Arrange
        use_case = await unit_env.get(FlagCommentUseCase)
        comment_repo = await unit_env.get(CommentRepository)
        comment = await comment_repo.save(make_root())

        # Act
        responses = [
            await use_case.execute(
                FlagCommentRequest(
                    comment_id=str(comment.id),
                    user_id=str(uuid4()),
                    reason=FlagReason.MISINFORMATION,
                )
            )
            for _ in range(5)
        ]

        # Assert
        assert [r.flag_count for r in responses] == [1, 2, 3, 4, 5]
        assert [r.status for r in responses] == ["active"] * 4 + ["flagged"]

    @pytest.mark.asyncio
    async def test_self_flag_rejected(self, unit_env):
        use_case = await unit_env.get(FlagCommentUseCase)
        comment_repo = await unit_env.get(CommentRepository)
        author_id = UserId(uuid4())
        comment = await comment_repo.save(make_root(author_id=author_id))

        with pytest.raises(InvalidOperationError):
            await use_case.execute(
                FlagCommentRequest(
                    comment_id=str(comment.id),
                    user_id=str(author_id),
                    reason=FlagReason.OTHER,
                )
            )


class TestUpdateCommentUseCase:
    """Tests for UpdateCommentUseCase."""

    @pytest.mark.asyncio
    async def test_author_edits_comment(self, unit_env):
        use_case = await unit_env.get(UpdateCommentUseCase)
        comment_repo = await unit_env.get(CommentRepository)
        author_id = UserId(uuid4())
        comment = await comment_repo.save(make_root(author_id=author_id, content="tpyo"))

        response = await use_case.execute(
            UpdateCommentRequest(
                comment_id=str(comment.id), user_id=str(author_id), content="typo"
            )
        )

        assert response.comment.content == "typo"
        assert response.comment.is_edited is True
        assert [e.content for e in response.comment.edit_history] == ["tpyo"]

    @pytest.mark.asyncio
    async def test_non_author_forbidden(self, unit_env):
        use_case = await unit_env.get(UpdateCommentUseCase)
        comment_repo = await unit_env.get(CommentRepository)
        comment = await comment_repo.save(make_root())

        with pytest.raises(ForbiddenError):
            await use_case.execute(
                UpdateCommentRequest(
                    comment_id=str(comment.id), user_id=str(uuid4()), content="mine now"
                )
            )

    @pytest.mark.asyncio
    async def test_old_comment_cannot_be_edited(self, unit_env):
        use_case = await unit_env.get(UpdateCommentUseCase)
        comment_repo = await unit_env.get(CommentRepository)
        author_id = UserId(uuid4())
        comment = await comment_repo.save(
            make_root(
                author_id=author_id, created_at=datetime.now(UTC) - timedelta(days=2)
            )
        )

        with pytest.raises(EditWindowExpiredError):
            await use_case.execute(
                UpdateCommentRequest(
                    comment_id=str(comment.id), user_id=str(author_id), content="late"
                )
            )
