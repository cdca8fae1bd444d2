"""Mock providers for testing."""

from .persistence import MockPersistenceProvider
from .stream import MockStreamProvider
from .container import build_test_container

__all__ = [
    "MockPersistenceProvider",
    "MockStreamProvider",
    "build_test_container",
]
