"""Create comment use case."""

from pydantic import BaseModel

from murmur.domain.model import Comment
from murmur.domain.service import CommentService
from murmur.domain.value import CommentId, UserId, VideoId


class CreateCommentRequest(BaseModel):
    """Create comment request."""

    video_id: str
    content: str
    author_id: str  # User ID from authenticated user
    author_name: str  # Display name from authenticated user
    author_image: str | None = None
    timestamp: str | None = None  # Playback position marker
    parent_id: str | None = None  # Parent comment ID for replies


class CreateCommentResponse(BaseModel):
    """Create comment response."""

    data: Comment


class CreateCommentUseCase:
    """Use case for commenting on a video or replying to another comment."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize create comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: CreateCommentRequest) -> CreateCommentResponse:
        """Execute create comment flow.

        The service verifies the video and parent, persists the comment and
        pushes a ``created`` event to the video's open streams.

        Args:
            request: Create comment request

        Returns:
            The created comment

        Raises:
            NotFoundError: If the video or parent comment does not exist
            ValidationError: If the parent belongs to another video
        """
        comment = await self.comment_service.create_comment(
            video_id=VideoId(request.video_id),
            author_id=UserId(request.author_id),
            author_name=request.author_name,
            content=request.content,
            timestamp=request.timestamp,
            parent_id=CommentId(request.parent_id) if request.parent_id else None,
            author_image=request.author_image,
        )
        return CreateCommentResponse(data=comment)
