"""Infrastructure providers."""

# Import bases
from .persistence import PersistenceProvider
from .stream import StreamProvider

# Import implementations (needed for __subclasses__())
from .persistence import ProdPersistenceProvider  # noqa: F401
from .stream import ProdStreamProvider  # noqa: F401

__all__ = [
    "PersistenceProvider",
    "ProdPersistenceProvider",
    "ProdStreamProvider",
    "StreamProvider",
]
