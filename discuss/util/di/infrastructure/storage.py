"""Attachment storage providers."""

from dishka import Scope, provide

from discuss.adapter.storage import LocalAttachmentStorage
from discuss.config import StorageSettings
from discuss.domain.service import AttachmentStorage
from discuss.util.di.base import ProviderBase


class StorageProvider(ProviderBase):
    """Storage component base."""

    __mock_component__ = "storage"


class ProdStorageProvider(StorageProvider):
    """Production storage provider writing to the local upload directory."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_attachment_storage(self, settings: StorageSettings) -> AttachmentStorage:
        """Provide attachment storage."""
        return LocalAttachmentStorage(
            upload_dir=settings.upload_dir, public_path=settings.public_path
        )
