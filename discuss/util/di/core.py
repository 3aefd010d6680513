"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from discuss.config import CommentSettings, PlatformSettings, Settings, StorageSettings
from discuss.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Settings loaded once from the environment and ``.env``."""

    scope = Scope.APP

    @provide
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide
    def provide_comment_settings(self, settings: Settings) -> CommentSettings:
        """Provide comment engine rules."""
        return settings.comments

    @provide
    def provide_platform_settings(self, settings: Settings) -> PlatformSettings:
        """Provide collaborator service settings."""
        return settings.platform

    @provide
    def provide_storage_settings(self, settings: Settings) -> StorageSettings:
        """Provide attachment storage settings."""
        return settings.storage
