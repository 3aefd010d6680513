"""Integration tests for PostgresCommentRepository.

These run against the database named by ``DATABASE__URL`` with migrations
applied, and are skipped when it is not set.
"""

import os
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from discuss.domain.repository import CommentRepository
from discuss.domain.service import CommentService, ThreadService
from discuss.domain.value import CommentStatus, CommentTarget, FlagReason, UserId
from tests.conftest import make_reply, make_root
from tests.harness import create_env_fixture

pytestmark = pytest.mark.skipif(
    not os.environ.get("DATABASE__URL"), reason="DATABASE__URL not set"
)

# Integration test fixture - real persistence
integration_env = create_env_fixture(unmock={"persistence"})


class TestCommentRepositoryIntegration:
    """Integration tests for PostgresCommentRepository."""

    @pytest.mark.asyncio
    async def test_round_trip_keeps_nested_values(self, integration_env):
        """Targets, mentions and collections survive storage."""
        # Arrange
        comment_repo = await integration_env.get(CommentRepository)
        mentioned = UserId(uuid4())
        comment = make_root(content="Stored", mentions=[mentioned])

        # Act
        await comment_repo.save(comment)
        await comment_repo.add_like(comment.id, UserId(uuid4()), datetime.now(UTC))
        loaded = await comment_repo.find_by_id(comment.id)

        # Assert
        assert loaded.target == comment.target
        assert loaded.mentions == [mentioned]
        assert loaded.like_count == 1
        assert len(loaded.likes) == 1

    @pytest.mark.asyncio
    async def test_reply_count_never_negative(self, integration_env):
        comment_repo = await integration_env.get(CommentRepository)
        comment = await comment_repo.save(make_root())

        await comment_repo.adjust_reply_count(comment.id, -3)

        assert (await comment_repo.find_by_id(comment.id)).reply_count == 0

    @pytest.mark.asyncio
    async def test_duplicate_like_and_flag_ignored(self, integration_env):
        comment_repo = await integration_env.get(CommentRepository)
        comment_service = await integration_env.get(CommentService)
        comment = await comment_repo.save(make_root())
        user_id = UserId(uuid4())

        assert await comment_repo.add_like(comment.id, user_id, datetime.now(UTC))
        assert not await comment_repo.add_like(comment.id, user_id, datetime.now(UTC))
        await comment_service.add_flag(comment.id, user_id, FlagReason.SPAM)
        result = await comment_service.add_flag(comment.id, user_id, FlagReason.OTHER)

        assert result.flag_count == 1
        assert result.like_count == 1

    @pytest.mark.asyncio
    async def test_delete_and_status_changes_are_conditional(self, integration_env):
        comment_repo = await integration_env.get(CommentRepository)
        comment = await comment_repo.save(make_root())
        now = datetime.now(UTC)

        first = await comment_repo.mark_deleted(comment.id, "[Comment deleted]", now)
        second = await comment_repo.mark_deleted(comment.id, "[Comment deleted]", now)
        wrong_state = await comment_repo.transition_status(
            comment.id, {CommentStatus.FLAGGED}, CommentStatus.HIDDEN
        )

        assert first.is_deleted is True
        assert second is None
        assert wrong_state is None

    @pytest.mark.asyncio
    async def test_previews_and_search_escape_wildcards(self, integration_env):
        comment_repo = await integration_env.get(CommentRepository)
        thread_service = await integration_env.get(ThreadService)
        target = CommentTarget.idea(uuid4())
        root = await comment_repo.save(make_root(target, content="50% done_ok"))
        await comment_repo.save(make_root(target, content="50 percent doneXok"))
        replies = [await comment_repo.save(make_reply(root)) for _ in range(3)]

        previews = await comment_repo.find_reply_previews([root.id], limit=2)
        results = await thread_service.search("% done_", target=target)

        assert [r.id for r in previews[root.id]] == [r.id for r in replies[:2]]
        assert [c.id for c in results] == [root.id]
