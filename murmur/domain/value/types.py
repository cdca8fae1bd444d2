"""Domain value types for Murmur."""

from enum import Enum


class CommentEventType(str, Enum):
    """Kind of change carried by a comment event."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class FrameType(str, Enum):
    """Named frames sent on the comment push channel."""

    CONNECTED = "connected"
    COMMENT = "comment"


class ChannelState(str, Enum):
    """Connection state of a comment channel client.

    disconnected -> connecting -> connected -> disconnected -> connecting ...
    CLOSED is terminal after close/disable, FAILED after retries run out.
    """

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"
    FAILED = "failed"
