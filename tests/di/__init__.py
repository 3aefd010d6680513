"""Mock providers for testing."""

from .persistence import MockPersistenceProvider
from .platform import MockPlatformProvider
from .storage import MockStorageProvider
from .container import build_test_container

__all__ = [
    "MockPersistenceProvider",
    "MockPlatformProvider",
    "MockStorageProvider",
    "build_test_container",
]
