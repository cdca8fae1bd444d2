"""Domain model entities for Murmur."""

from murmur.domain.model.comment import Comment, CommentNode
from murmur.domain.model.event import (
    CommentCreatedEvent,
    CommentDeletedEvent,
    CommentEvent,
    CommentPatch,
    CommentRef,
    CommentUpdatedEvent,
    dump_comment_event,
    parse_comment_event,
)
from murmur.domain.model.video import Video

__all__ = [
    "Comment",
    "CommentNode",
    "CommentEvent",
    "CommentCreatedEvent",
    "CommentUpdatedEvent",
    "CommentDeletedEvent",
    "CommentPatch",
    "CommentRef",
    "Video",
    "dump_comment_event",
    "parse_comment_event",
]
