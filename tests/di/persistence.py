"""Mock persistence providers for testing."""

from dishka import Scope, provide

from discuss.domain.repository import CommentRepository, UnitOfWork
from discuss.persistence.repository.inmemory import InMemoryCommentRepository, InMemoryUnitOfWork
from discuss.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using the in-memory repository.

    Uses REQUEST scope to ensure test isolation - each test gets a fresh store.
    """

    __is_mock__ = True

    @provide(scope=Scope.REQUEST)
    def get_comment_repository(self) -> CommentRepository:
        """Provide in-memory comment repository."""
        return InMemoryCommentRepository()

    @provide(scope=Scope.REQUEST)
    def get_unit_of_work(self) -> UnitOfWork:
        """Provide in-memory transaction boundary."""
        return InMemoryUnitOfWork()
