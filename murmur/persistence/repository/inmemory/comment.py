"""In-memory comment repository for testing."""

from typing import Optional

from murmur.domain.model.comment import Comment, utcnow
from murmur.domain.repository.comment import CommentRepository
from murmur.domain.value import CommentId, VideoId


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing."""

    def __init__(self) -> None:
        self._comments: dict[CommentId, Comment] = {}

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        return self._comments.get(comment_id)

    async def find_by_video(self, video_id: VideoId) -> list[Comment]:
        """Find all comments for a video, oldest first."""
        comments = [c for c in self._comments.values() if c.video_id == video_id]
        # Stable sort keeps insertion order for equal timestamps
        comments.sort(key=lambda c: c.created_at)
        return comments

    async def find_by_timestamp_range(
        self, video_id: VideoId, start: str, end: str
    ) -> list[Comment]:
        """Find timestamped comments within [start, end]."""
        comments = [
            c
            for c in self._comments.values()
            if c.video_id == video_id
            and c.timestamp is not None
            and start <= c.timestamp <= end
        ]
        comments.sort(key=lambda c: (c.timestamp, c.created_at))
        return comments

    async def save(self, comment: Comment) -> Comment:
        """Save or update a comment."""
        self._comments[comment.id] = comment
        return comment

    async def update_content(
        self, comment_id: CommentId, content: str
    ) -> Optional[Comment]:
        """Update the content of a comment."""
        comment = self._comments.get(comment_id)
        if comment is None:
            return None
        updated = comment.model_copy(update={"content": content, "updated_at": utcnow()})
        self._comments[comment_id] = updated
        return updated

    async def delete(self, comment_id: CommentId) -> None:
        """Delete a comment and, like the database cascade, all its replies."""
        doomed = {comment_id}
        changed = True
        while changed:
            changed = False
            for c in self._comments.values():
                if c.parent_id in doomed and c.id not in doomed:
                    doomed.add(c.id)
                    changed = True
        for cid in doomed:
            self._comments.pop(cid, None)
