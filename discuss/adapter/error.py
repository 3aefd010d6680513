"""Errors raised by adapters for platform services and storage."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class ProviderError(AdapterError):
    """A collaborator service failed or could not be reached."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class StorageError(AdapterError):
    """An attachment could not be stored."""

    pass
