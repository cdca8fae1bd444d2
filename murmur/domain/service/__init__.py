"""Domain services."""

from .base import Service
from .comment_broker import CommentEventBroker, CommentEventStream
from .comment_service import CommentService
from .jwt_service import JWTService

__all__ = [
    "CommentEventBroker",
    "CommentEventStream",
    "CommentService",
    "JWTService",
    "Service",
]
