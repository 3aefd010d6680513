"""Application layer DI providers."""

from dishka import Scope, provide

from discuss.application.usecase.comment import (
    CreateCommentUseCase,
    DeleteCommentUseCase,
    FlagCommentUseCase,
    GetCommentsUseCase,
    GetRepliesUseCase,
    GetThreadUseCase,
    GetUserCommentsUseCase,
    ModerateCommentUseCase,
    SearchCommentsUseCase,
    ToggleLikeUseCase,
    UpdateCommentUseCase,
)
from discuss.config import StorageSettings
from discuss.domain.repository import UnitOfWork
from discuss.domain.service import (
    AttachmentStorage,
    CommentService,
    IdentityDirectory,
    ModerationService,
    ParentContentGateway,
    ThreadService,
)
from discuss.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    scope = Scope.REQUEST

    # Mutations
    @provide
    def get_create_comment_use_case(
        self,
        comment_service: CommentService,
        content_gateway: ParentContentGateway,
        attachment_storage: AttachmentStorage,
        storage_settings: StorageSettings,
        unit_of_work: UnitOfWork,
    ) -> CreateCommentUseCase:
        """Provide create comment use case."""
        return CreateCommentUseCase(
            comment_service=comment_service,
            content_gateway=content_gateway,
            attachment_storage=attachment_storage,
            storage_settings=storage_settings,
            unit_of_work=unit_of_work,
        )

    @provide
    def get_update_comment_use_case(
        self, comment_service: CommentService
    ) -> UpdateCommentUseCase:
        """Provide update comment use case."""
        return UpdateCommentUseCase(comment_service=comment_service)

    @provide
    def get_delete_comment_use_case(
        self,
        comment_service: CommentService,
        identity_directory: IdentityDirectory,
        content_gateway: ParentContentGateway,
        unit_of_work: UnitOfWork,
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(
            comment_service=comment_service,
            identity_directory=identity_directory,
            content_gateway=content_gateway,
            unit_of_work=unit_of_work,
        )

    @provide
    def get_toggle_like_use_case(
        self, comment_service: CommentService
    ) -> ToggleLikeUseCase:
        """Provide toggle like use case."""
        return ToggleLikeUseCase(comment_service=comment_service)

    @provide
    def get_flag_comment_use_case(
        self, comment_service: CommentService
    ) -> FlagCommentUseCase:
        """Provide flag comment use case."""
        return FlagCommentUseCase(comment_service=comment_service)

    @provide
    def get_moderate_comment_use_case(
        self,
        moderation_service: ModerationService,
        identity_directory: IdentityDirectory,
    ) -> ModerateCommentUseCase:
        """Provide moderate comment use case."""
        return ModerateCommentUseCase(
            moderation_service=moderation_service,
            identity_directory=identity_directory,
        )

    # Reads
    @provide
    def get_get_comments_use_case(
        self, thread_service: ThreadService
    ) -> GetCommentsUseCase:
        """Provide thread page use case."""
        return GetCommentsUseCase(thread_service=thread_service)

    @provide
    def get_get_replies_use_case(self, thread_service: ThreadService) -> GetRepliesUseCase:
        """Provide load-more-replies use case."""
        return GetRepliesUseCase(thread_service=thread_service)

    @provide
    def get_get_thread_use_case(self, thread_service: ThreadService) -> GetThreadUseCase:
        """Provide full thread use case."""
        return GetThreadUseCase(thread_service=thread_service)

    @provide
    def get_search_comments_use_case(
        self, thread_service: ThreadService
    ) -> SearchCommentsUseCase:
        """Provide search use case."""
        return SearchCommentsUseCase(thread_service=thread_service)

    @provide
    def get_get_user_comments_use_case(
        self, thread_service: ThreadService
    ) -> GetUserCommentsUseCase:
        """Provide user comments use case."""
        return GetUserCommentsUseCase(thread_service=thread_service)
