"""Domain value objects for Murmur."""

from murmur.domain.value.identifiers import CommentId, UserId, VideoId
from murmur.domain.value.types import ChannelState, CommentEventType, FrameType

__all__ = [
    # Identifiers
    "CommentId",
    "UserId",
    "VideoId",
    # Types
    "ChannelState",
    "CommentEventType",
    "FrameType",
]
