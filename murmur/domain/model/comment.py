"""Comment entity.

Comments are threaded remarks on a video. A comment without ``parent_id``
is a root comment; replies point at a root or at another reply.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from murmur.domain.model.common import DomainModel
from murmur.domain.value import CommentId, UserId, VideoId


def utcnow() -> datetime:
    """Current time, timezone-aware."""
    return datetime.now(timezone.utc)


class Comment(DomainModel):
    """Comment entity.

    Author fields are denormalized display info, copied from the author's
    token at creation. They are optional because pushed payloads may omit
    them.
    """

    id: CommentId
    content: str = Field(min_length=1, max_length=10000)
    video_id: Optional[VideoId] = None
    author_id: Optional[UserId] = None
    author_name: Optional[str] = None
    author_image: Optional[str] = None
    timestamp: Optional[str] = Field(default=None, max_length=32)  # Playback position
    parent_id: Optional[CommentId] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None


class CommentNode(Comment):
    """A comment together with its replies, in arrival order."""

    replies: list["CommentNode"] = Field(default_factory=list)

    @classmethod
    def from_comment(
        cls, comment: Comment, replies: Optional[list["CommentNode"]] = None
    ) -> "CommentNode":
        """Wrap a flat comment as a tree node."""
        if isinstance(comment, CommentNode) and replies is None:
            return comment
        return cls(**comment.model_dump(exclude={"replies"}), replies=replies or [])
