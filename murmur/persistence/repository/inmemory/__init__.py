"""In-memory repository implementations for testing."""

from .comment import InMemoryCommentRepository
from .video import InMemoryVideoRepository

__all__ = [
    "InMemoryCommentRepository",
    "InMemoryVideoRepository",
]
