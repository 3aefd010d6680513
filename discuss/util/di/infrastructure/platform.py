"""Platform service providers (identity directory and parent content)."""

from dishka import Scope, provide

from discuss.adapter.platform import HttpIdentityDirectory, HttpParentContentGateway
from discuss.config import PlatformSettings
from discuss.domain.service import IdentityDirectory, ParentContentGateway
from discuss.util.di.base import ProviderBase
from discuss.util.error import ConfigurationError
from discuss.util.observability import instrument_httpx


class PlatformProvider(ProviderBase):
    """Platform component base."""

    __mock_component__ = "platform"


class ProdPlatformProvider(PlatformProvider):
    """Production platform provider talking HTTP to the owning services."""

    __is_mock__ = False

    scope = Scope.APP

    @provide
    def get_identity_directory(self, settings: PlatformSettings) -> IdentityDirectory:
        """Provide identity directory client.

        Raises:
            ConfigurationError: If the identity service URL is not configured
        """
        if not settings.identity_url:
            raise ConfigurationError("PLATFORM__IDENTITY_URL must be configured")
        instrument_httpx()
        return HttpIdentityDirectory(
            base_url=settings.identity_url, timeout=settings.timeout_seconds
        )

    @provide
    def get_content_gateway(self, settings: PlatformSettings) -> ParentContentGateway:
        """Provide ideas/domains gateway client.

        Raises:
            ConfigurationError: If the content service URL is not configured
        """
        if not settings.content_url:
            raise ConfigurationError("PLATFORM__CONTENT_URL must be configured")
        return HttpParentContentGateway(
            base_url=settings.content_url, timeout=settings.timeout_seconds
        )
