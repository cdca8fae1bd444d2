"""Update comment use case."""

from pydantic import BaseModel

from murmur.domain.model import Comment
from murmur.domain.service import CommentService
from murmur.domain.value import CommentId, UserId


class UpdateCommentRequest(BaseModel):
    """Update comment request."""

    comment_id: str
    user_id: str  # Current user ID (must be author)
    content: str  # New content (required, cannot be empty)


class UpdateCommentResponse(BaseModel):
    """Update comment response."""

    data: Comment


class UpdateCommentUseCase:
    """Use case for editing a comment's content."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize update comment use case.

        Args:
            comment_service: Comment service
        """
        self.comment_service = comment_service

    async def execute(self, request: UpdateCommentRequest) -> UpdateCommentResponse:
        """Execute update comment flow.

        Args:
            request: Update comment request with comment ID, user ID and content

        Returns:
            Updated comment

        Raises:
            NotFoundError: If the comment does not exist
            NotAuthorizedError: If the user is not the author
        """
        updated = await self.comment_service.update_content(
            CommentId(request.comment_id),
            UserId(request.user_id),
            request.content,
        )
        return UpdateCommentResponse(data=updated)
