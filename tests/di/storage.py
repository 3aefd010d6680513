"""Mock storage providers for testing."""

from dishka import Scope, provide

from discuss.adapter.storage import InMemoryAttachmentStorage
from discuss.domain.service import AttachmentStorage
from discuss.util.di.infrastructure.storage import StorageProvider


class MockStorageProvider(StorageProvider):
    """Attachment storage kept in memory."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_attachment_storage(self) -> AttachmentStorage:
        """Provide in-memory attachment storage."""
        return InMemoryAttachmentStorage()
