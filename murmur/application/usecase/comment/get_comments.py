"""Get comments use cases."""

from pydantic import BaseModel

from murmur.domain.model import Comment, CommentNode
from murmur.domain.service import CommentService
from murmur.domain.service.comment_tree import count_comments
from murmur.domain.value import VideoId


class GetCommentsRequest(BaseModel):
    """Get comments request."""

    video_id: str


class GetCommentsResponse(BaseModel):
    """Threaded snapshot of a video's comments."""

    data: list[CommentNode]
    total: int  # Every comment in the tree, replies included


class GetCommentsUseCase:
    """Use case for fetching the comment tree a client mounts with."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: GetCommentsRequest) -> GetCommentsResponse:
        """Execute get comments flow.

        Args:
            request: Get comments request with video ID

        Returns:
            Root comments, oldest first, with nested replies
        """
        tree = await self.comment_service.get_comment_tree(VideoId(request.video_id))
        return GetCommentsResponse(data=tree, total=count_comments(tree))


class GetCommentsInRangeRequest(BaseModel):
    """Comments pinned to a playback window."""

    video_id: str
    start: str
    end: str


class GetCommentsInRangeResponse(BaseModel):
    data: list[Comment]
    total: int


class GetCommentsInRangeUseCase:
    """Use case for fetching comments whose timestamp falls in a window."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(
        self, request: GetCommentsInRangeRequest
    ) -> GetCommentsInRangeResponse:
        """Execute range query.

        Raises:
            ValidationError: If start is after end
        """
        comments = await self.comment_service.get_comments_in_range(
            VideoId(request.video_id), request.start, request.end
        )
        return GetCommentsInRangeResponse(data=comments, total=len(comments))
