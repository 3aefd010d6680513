"""Unit tests for CreateCommentUseCase."""

from uuid import UUID, uuid4

import pytest

from discuss.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentUseCase,
    UploadedFile,
)
from discuss.domain.error import (
    ConflictError,
    ContentDeletedError,
    MalformedIdentifierError,
    NotFoundError,
    ValidationError,
)
from discuss.domain.repository import CommentRepository, UnitOfWork
from discuss.domain.service import AttachmentStorage, CommentService, ParentContentGateway
from discuss.domain.value import CommentId, IdeaId, TargetKind, UserId
from tests.conftest import make_root
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestCreateCommentUseCase:
    """Tests for CreateCommentUseCase."""

    @pytest.mark.asyncio
    async def test_root_comment_on_idea_increments_idea_counter(self, unit_env):
        """Creating a root comment on an idea should bump its counter."""
        # Arrange
        use_case = await unit_env.get(CreateCommentUseCase)
        gateway = await unit_env.get(ParentContentGateway)
        idea_id = gateway.add_idea(IdeaId(uuid4()))
        author_id = UserId(uuid4())

        request = CreateCommentRequest(
            author_id=str(author_id),
            content="Have you tried a control group?",
            target_kind=TargetKind.IDEA,
            target_id=str(idea_id),
        )

        # Act
        response = await use_case.execute(request)

        # Assert
        assert response.is_reply is False
        assert response.comment.target_kind == "idea"
        assert response.comment.target_id == str(idea_id)
        assert response.comment.author_id == str(author_id)
        assert response.comment.thread_level == 0
        assert gateway.comment_counts[idea_id] == 1

    @pytest.mark.asyncio
    async def test_root_comment_on_domain_has_no_counter(self, unit_env):
        """Domains have no comment counter to maintain."""
        use_case = await unit_env.get(CreateCommentUseCase)
        gateway = await unit_env.get(ParentContentGateway)
        domain_id = gateway.add_domain(uuid4())

        response = await use_case.execute(
            CreateCommentRequest(
                author_id=str(uuid4()),
                content="Welcome to the domain",
                target_kind=TargetKind.DOMAIN,
                target_id=str(domain_id),
            )
        )

        assert response.comment.target_kind == "domain"
        assert gateway.comment_counts == {}

    @pytest.mark.asyncio
    async def test_missing_idea_raises_not_found(self, unit_env):
        """Comments on unknown ideas are rejected before anything is stored."""
        use_case = await unit_env.get(CreateCommentUseCase)
        comment_repo = await unit_env.get(CommentRepository)
        idea_id = uuid4()

        with pytest.raises(NotFoundError):
            await use_case.execute(
                CreateCommentRequest(
                    author_id=str(uuid4()),
                    content="Hello?",
                    target_kind=TargetKind.IDEA,
                    target_id=str(idea_id),
                )
            )

        assert await comment_repo.search("Hello") == []

    @pytest.mark.asyncio
    async def test_counter_failure_does_not_fail_comment(self, unit_env):
        """The comment survives a failing counter update."""
        use_case = await unit_env.get(CreateCommentUseCase)
        gateway = await unit_env.get(ParentContentGateway)
        comment_service = await unit_env.get(CommentService)
        idea_id = gateway.add_idea(IdeaId(uuid4()))
        gateway.fail_counter_updates = True

        response = await use_case.execute(
            CreateCommentRequest(
                author_id=str(uuid4()),
                content="Still posted",
                target_kind=TargetKind.IDEA,
                target_id=str(idea_id),
            )
        )

        stored = await comment_service.get_comment_by_id(
            CommentId(UUID(response.comment.comment_id))
        )
        assert stored is not None
        assert gateway.comment_counts[idea_id] == 0

    @pytest.mark.asyncio
    async def test_missing_target_rejected(self, unit_env):
        use_case = await unit_env.get(CreateCommentUseCase)

        with pytest.raises(ValidationError):
            await use_case.execute(
                CreateCommentRequest(author_id=str(uuid4()), content="Floating")
            )

    @pytest.mark.asyncio
    async def test_reply_does_not_touch_idea_counter(self, unit_env):
        """Only root comments count toward the idea counter."""
        # Arrange
        use_case = await unit_env.get(CreateCommentUseCase)
        gateway = await unit_env.get(ParentContentGateway)
        comment_repo = await unit_env.get(CommentRepository)
        idea_id = gateway.add_idea(IdeaId(uuid4()))
        root = await comment_repo.save(make_root())

        # Act
        response = await use_case.execute(
            CreateCommentRequest(
                author_id=str(uuid4()),
                content="A reply",
                parent_id=str(root.id),
            )
        )

        # Assert
        assert response.is_reply is True
        assert response.comment.parent_id == str(root.id)
        assert response.comment.target_kind == "comment"
        assert gateway.comment_counts[idea_id] == 0

    @pytest.mark.asyncio
    async def test_reply_to_deleted_comment_rejected(self, unit_env):
        use_case = await unit_env.get(CreateCommentUseCase)
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        author_id = UserId(uuid4())
        root = await comment_repo.save(make_root(author_id=author_id))
        await comment_service.soft_delete(root.id, author_id)

        with pytest.raises(ContentDeletedError):
            await use_case.execute(
                CreateCommentRequest(
                    author_id=str(uuid4()), content="Hi", parent_id=str(root.id)
                )
            )

    @pytest.mark.asyncio
    async def test_attachments_stored_and_referenced(self, unit_env):
        """Uploads are stored and attached to the comment."""
        # Arrange
        use_case = await unit_env.get(CreateCommentUseCase)
        gateway = await unit_env.get(ParentContentGateway)
        storage = await unit_env.get(AttachmentStorage)
        idea_id = gateway.add_idea(IdeaId(uuid4()))

        # Act
        response = await use_case.execute(
            CreateCommentRequest(
                author_id=str(uuid4()),
                content="See attached",
                target_kind=TargetKind.IDEA,
                target_id=str(idea_id),
                attachments=[
                    UploadedFile(filename="plot.PNG", content_type="image/png", data=b"png"),
                    UploadedFile(
                        filename="paper.pdf", content_type="application/pdf", data=b"pdf!"
                    ),
                ],
            )
        )

        # Assert
        attachments = response.comment.attachments
        assert [a.type for a in attachments] == ["image", "document"]
        assert [a.filename for a in attachments] == ["plot.PNG", "paper.pdf"]
        assert [a.size for a in attachments] == [3, 4]
        assert attachments[0].url.startswith("/uploads/comments/")
        assert attachments[0].url.endswith(".png")
        assert len(storage.files) == 2

    @pytest.mark.asyncio
    async def test_too_many_attachments_rejected(self, unit_env):
        """Attachment limits are checked before anything is stored."""
        use_case = await unit_env.get(CreateCommentUseCase)
        gateway = await unit_env.get(ParentContentGateway)
        storage = await unit_env.get(AttachmentStorage)
        idea_id = gateway.add_idea(IdeaId(uuid4()))

        with pytest.raises(ValidationError):
            await use_case.execute(
                CreateCommentRequest(
                    author_id=str(uuid4()),
                    content="Lots of files",
                    target_kind=TargetKind.IDEA,
                    target_id=str(idea_id),
                    attachments=[
                        UploadedFile(filename=f"f{i}.txt", data=b"x") for i in range(6)
                    ],
                )
            )

        assert storage.files == {}
        assert gateway.comment_counts[idea_id] == 0

    @pytest.mark.asyncio
    async def test_blank_content_rejected_before_upload(self, unit_env):
        use_case = await unit_env.get(CreateCommentUseCase)
        gateway = await unit_env.get(ParentContentGateway)
        storage = await unit_env.get(AttachmentStorage)
        idea_id = gateway.add_idea(IdeaId(uuid4()))

        with pytest.raises(ValidationError):
            await use_case.execute(
                CreateCommentRequest(
                    author_id=str(uuid4()),
                    content="   ",
                    target_kind=TargetKind.IDEA,
                    target_id=str(idea_id),
                    attachments=[UploadedFile(filename="a.txt", data=b"x")],
                )
            )

        assert storage.files == {}

    @pytest.mark.asyncio
    async def test_oversized_attachment_rejected(self, unit_env):
        use_case = await unit_env.get(CreateCommentUseCase)
        gateway = await unit_env.get(ParentContentGateway)
        idea_id = gateway.add_idea(IdeaId(uuid4()))

        with pytest.raises(ValidationError):
            await use_case.execute(
                CreateCommentRequest(
                    author_id=str(uuid4()),
                    content="Big file",
                    target_kind=TargetKind.IDEA,
                    target_id=str(idea_id),
                    attachments=[
                        UploadedFile(
                            filename="huge.bin", data=b"\0" * (10 * 1024 * 1024 + 1)
                        )
                    ],
                )
            )

    @pytest.mark.asyncio
    async def test_reply_to_missing_parent_stores_no_uploads(self, unit_env):
        """Uploads are only written once the parent is known to accept replies."""
        use_case = await unit_env.get(CreateCommentUseCase)
        storage = await unit_env.get(AttachmentStorage)

        with pytest.raises(NotFoundError):
            await use_case.execute(
                CreateCommentRequest(
                    author_id=str(uuid4()),
                    content="Orphaned?",
                    parent_id=str(uuid4()),
                    attachments=[
                        UploadedFile(filename="a.png", content_type="image/png", data=b"png")
                    ],
                )
            )

        assert storage.files == {}

    @pytest.mark.asyncio
    async def test_reply_to_deleted_parent_stores_no_uploads(self, unit_env):
        use_case = await unit_env.get(CreateCommentUseCase)
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        storage = await unit_env.get(AttachmentStorage)
        author_id = UserId(uuid4())
        root = await comment_repo.save(make_root(author_id=author_id))
        await comment_service.soft_delete(root.id, author_id)

        with pytest.raises(ContentDeletedError):
            await use_case.execute(
                CreateCommentRequest(
                    author_id=str(uuid4()),
                    content="Too late",
                    parent_id=str(root.id),
                    attachments=[UploadedFile(filename="notes.txt", data=b"x")],
                )
            )

        assert storage.files == {}

    @pytest.mark.asyncio
    async def test_idea_counter_moves_only_after_commit(self, unit_env):
        """A rejected commit leaves the idea counter untouched."""
        # Arrange
        use_case = await unit_env.get(CreateCommentUseCase)
        gateway = await unit_env.get(ParentContentGateway)
        unit_of_work = await unit_env.get(UnitOfWork)
        idea_id = gateway.add_idea(IdeaId(uuid4()))
        unit_of_work.fail_commits = True

        # Act
        with pytest.raises(ConflictError):
            await use_case.execute(
                CreateCommentRequest(
                    author_id=str(uuid4()),
                    content="Never lands",
                    target_kind=TargetKind.IDEA,
                    target_id=str(idea_id),
                )
            )

        # Assert
        assert gateway.comment_counts[idea_id] == 0

    @pytest.mark.asyncio
    async def test_root_on_idea_commits_once(self, unit_env):
        use_case = await unit_env.get(CreateCommentUseCase)
        gateway = await unit_env.get(ParentContentGateway)
        unit_of_work = await unit_env.get(UnitOfWork)
        idea_id = gateway.add_idea(IdeaId(uuid4()))

        await use_case.execute(
            CreateCommentRequest(
                author_id=str(uuid4()),
                content="Committed first",
                target_kind=TargetKind.IDEA,
                target_id=str(idea_id),
            )
        )

        assert unit_of_work.commits == 1
        assert gateway.comment_counts[idea_id] == 1

    @pytest.mark.asyncio
    async def test_malformed_parent_id_rejected(self, unit_env):
        use_case = await unit_env.get(CreateCommentUseCase)

        with pytest.raises(MalformedIdentifierError) as exc_info:
            await use_case.execute(
                CreateCommentRequest(
                    author_id=str(uuid4()), content="Hi", parent_id="not-a-uuid"
                )
            )

        assert exc_info.value.field == "parent_id"
