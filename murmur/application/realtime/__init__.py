"""Client-side real-time comment synchronization."""

from .channel import CommentChannelClient, backoff_delay_ms
from .controller import (
    RealtimeCommentsController,
    RealtimeCommentsControllerFactory,
    RealtimeCommentsState,
)
from .store import CommentTreeStore, Listeners

__all__ = [
    "CommentChannelClient",
    "CommentTreeStore",
    "Listeners",
    "RealtimeCommentsController",
    "RealtimeCommentsControllerFactory",
    "RealtimeCommentsState",
    "backoff_delay_ms",
]
