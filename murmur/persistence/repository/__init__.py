"""PostgreSQL repository implementations."""

from murmur.persistence.repository.comment import PostgresCommentRepository
from murmur.persistence.repository.video import PostgresVideoRepository

__all__ = [
    "PostgresCommentRepository",
    "PostgresVideoRepository",
]
