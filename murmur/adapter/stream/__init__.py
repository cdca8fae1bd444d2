"""Comment push channel transports and event-stream codec."""

from .sse import ServerSentEvent, SSEDecoder, encode_comment, encode_event
from .transport import (
    CommentStreamTransport,
    HttpxCommentStreamTransport,
    MockCommentStreamTransport,
    MockStreamConnection,
)

__all__ = [
    "CommentStreamTransport",
    "HttpxCommentStreamTransport",
    "MockCommentStreamTransport",
    "MockStreamConnection",
    "ServerSentEvent",
    "SSEDecoder",
    "encode_comment",
    "encode_event",
]
