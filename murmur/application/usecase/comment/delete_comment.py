"""Delete comment use case."""

from pydantic import BaseModel

from murmur.application.usecase.base import BaseUseCase
from murmur.domain.service import CommentService
from murmur.domain.value import CommentId, UserId


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    comment_id: str
    user_id: str  # Author, or owner of the video


class DeleteCommentResponse(BaseModel):
    """Delete comment response."""

    success: bool
    id: str


class DeleteCommentUseCase(BaseUseCase):
    """Use case for deleting a comment together with its replies."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Execute delete comment flow.

        Raises:
            NotFoundError: If the comment does not exist
            NotAuthorizedError: If the user is neither author nor video owner
        """
        deleted = await self.comment_service.delete_comment(
            CommentId(request.comment_id), UserId(request.user_id)
        )
        return DeleteCommentResponse(success=True, id=deleted.id)
