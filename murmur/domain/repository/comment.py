"""Comment repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from murmur.domain.model.comment import Comment
from murmur.domain.value import CommentId, VideoId


class CommentRepository(ABC):
    """Repository for Comment entity.

    Defines the contract for comment persistence operations.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID.

        Args:
            comment_id: The comment's unique identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_video(self, video_id: VideoId) -> List[Comment]:
        """Find all comments for a video, oldest first.

        Args:
            video_id: The video ID

        Returns:
            Flat list of comments ordered by creation time
        """
        pass

    @abstractmethod
    async def find_by_timestamp_range(
        self, video_id: VideoId, start: str, end: str
    ) -> List[Comment]:
        """Find timestamped comments whose marker falls within [start, end].

        Markers are compared as strings, so callers should use a fixed-width
        format such as ``HH:MM:SS``.

        Args:
            video_id: The video ID
            start: Inclusive lower bound
            end: Inclusive upper bound

        Returns:
            Comments ordered by timestamp
        """
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update).

        Args:
            comment: The comment to save

        Returns:
            The saved comment
        """
        pass

    @abstractmethod
    async def update_content(
        self, comment_id: CommentId, content: str
    ) -> Optional[Comment]:
        """Replace a comment's content and refresh ``updated_at``.

        Args:
            comment_id: The comment ID
            content: New content

        Returns:
            The updated comment, or None if it does not exist
        """
        pass

    @abstractmethod
    async def delete(self, comment_id: CommentId) -> None:
        """Delete a comment and every reply beneath it.

        Args:
            comment_id: The comment ID to delete
        """
        pass
