"""Domain layer DI providers."""

from dishka import Scope, provide

from discuss.config import CommentSettings
from discuss.domain.repository import CommentRepository
from discuss.domain.service import (
    CommentService,
    IdentityDirectory,
    MentionService,
    ModerationService,
    ThreadService,
)
from discuss.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with the repository session.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_mention_service(
        self, identity_directory: IdentityDirectory
    ) -> MentionService:
        """Provide mention resolution service."""
        return MentionService(identity_directory=identity_directory)

    @provide
    def get_moderation_service(
        self, comment_repository: CommentRepository, settings: CommentSettings
    ) -> ModerationService:
        """Provide moderation state machine."""
        return ModerationService(comment_repository=comment_repository, settings=settings)

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        mention_service: MentionService,
        moderation_service: ModerationService,
        settings: CommentSettings,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            mention_service=mention_service,
            moderation_service=moderation_service,
            settings=settings,
        )

    @provide
    def get_thread_service(
        self, comment_repository: CommentRepository, settings: CommentSettings
    ) -> ThreadService:
        """Provide thread read service."""
        return ThreadService(comment_repository=comment_repository, settings=settings)
