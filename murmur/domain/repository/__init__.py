"""Repository interfaces for Murmur domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from murmur.domain.repository.comment import CommentRepository
from murmur.domain.repository.video import VideoRepository

__all__ = [
    "CommentRepository",
    "VideoRepository",
]
