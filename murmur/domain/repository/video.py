"""Video repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from murmur.domain.model.video import Video
from murmur.domain.value import VideoId


class VideoRepository(ABC):
    """Repository for Video entity.

    Videos are owned by the surrounding application; comments only need
    to look them up.
    """

    @abstractmethod
    async def find_by_id(self, video_id: VideoId) -> Optional[Video]:
        """Find a video by ID.

        Args:
            video_id: The video's unique identifier

        Returns:
            The video if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, video: Video) -> Video:
        """Save a video (create or update).

        Args:
            video: The video to save

        Returns:
            The saved video
        """
        pass
