"""Comment routes.

Reads and the push stream are public. Writes need the ``auth_token``
cookie issued by the surrounding application.
"""

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from murmur.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
    GetCommentsInRangeRequest,
    GetCommentsInRangeResponse,
    GetCommentsInRangeUseCase,
    GetCommentsRequest,
    GetCommentsResponse,
    GetCommentsUseCase,
    StreamCommentsRequest,
    StreamCommentsUseCase,
    UpdateCommentRequest,
    UpdateCommentResponse,
    UpdateCommentUseCase,
)
from murmur.domain.error import NotAuthorizedError, NotFoundError, ValidationError
from murmur.domain.service import JWTService
from murmur.util.jwt import TokenPayload

router = APIRouter(tags=["comments"], route_class=DishkaRoute)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable proxy buffering
}


def _require_user(
    jwt_service: JWTService, auth_token: str | None, action: str
) -> TokenPayload:
    payload = jwt_service.get_payload_from_token(auth_token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Authentication required to {action} comments",
        )
    return payload


class CreateCommentAPIRequest(BaseModel):
    """API request for creating a comment."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: str = Field(min_length=1, max_length=10000)
    timestamp: str | None = Field(default=None, max_length=32)
    parent_id: str | None = None  # Parent comment ID for replies


@router.post(
    "/videos/{video_id}/comments",
    response_model=CreateCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    video_id: str,
    request: CreateCommentAPIRequest,
    create_comment_use_case: FromDishka[CreateCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> CreateCommentResponse:
    """Comment on a video or reply to another comment.

    Requires authentication. The new comment is pushed to every open
    stream for the video.

    Args:
        video_id: Video ID
        request: Comment creation data
        create_comment_use_case: Create comment use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie

    Returns:
        Created comment

    Raises:
        HTTPException: If not authenticated, video/parent missing, or invalid
    """
    user = _require_user(jwt_service, auth_token, "create")

    try:
        use_case_request = CreateCommentRequest(
            video_id=video_id,
            content=request.content,
            author_id=user.user_id,
            author_name=user.name,
            author_image=user.image,
            timestamp=request.timestamp,
            parent_id=request.parent_id,
        )
        return await create_comment_use_case.execute(use_case_request)
    except NotFoundError as e:
        logfire.warn("Comment creation failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except (ValidationError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("/videos/{video_id}/comments", response_model=GetCommentsResponse)
async def get_comments(
    video_id: str,
    get_comments_use_case: FromDishka[GetCommentsUseCase],
) -> GetCommentsResponse:
    """Get a video's comments as a threaded tree.

    This is the snapshot a realtime client mounts with before it opens
    the stream.
    """
    return await get_comments_use_case.execute(GetCommentsRequest(video_id=video_id))


@router.get(
    "/videos/{video_id}/comments/range", response_model=GetCommentsInRangeResponse
)
async def get_comments_in_range(
    video_id: str,
    get_comments_in_range_use_case: FromDishka[GetCommentsInRangeUseCase],
    start: str = Query(max_length=32),
    end: str = Query(max_length=32),
) -> GetCommentsInRangeResponse:
    """Get comments pinned to playback positions within [start, end]."""
    try:
        return await get_comments_in_range_use_case.execute(
            GetCommentsInRangeRequest(video_id=video_id, start=start, end=end)
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("/videos/{video_id}/comments/stream")
async def stream_comments(
    video_id: str,
    request: Request,
    stream_comments_use_case: FromDishka[StreamCommentsUseCase],
) -> StreamingResponse:
    """Server-sent event stream of a video's comment changes.

    Sends ``connected`` once subscribed, then one ``comment`` frame per
    created, updated or deleted comment, with ``: ping`` keep-alives.
    """
    body = stream_comments_use_case.execute(
        StreamCommentsRequest(video_id=video_id),
        is_disconnected=request.is_disconnected,
    )
    return StreamingResponse(body, media_type="text/event-stream", headers=SSE_HEADERS)


class UpdateCommentAPIRequest(BaseModel):
    """API request for updating a comment."""

    content: str = Field(min_length=1, max_length=10000)


@router.patch("/comments/{comment_id}", response_model=UpdateCommentResponse)
async def update_comment(
    comment_id: str,
    request: UpdateCommentAPIRequest,
    update_comment_use_case: FromDishka[UpdateCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> UpdateCommentResponse:
    """Edit a comment's content.

    Only the comment author can edit.

    Args:
        comment_id: Comment ID
        request: Update data (content)
        update_comment_use_case: Update comment use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie

    Returns:
        Updated comment

    Raises:
        HTTPException: If not authenticated, not authorized, or not found
    """
    user = _require_user(jwt_service, auth_token, "edit")

    try:
        return await update_comment_use_case.execute(
            UpdateCommentRequest(
                comment_id=comment_id,
                user_id=user.user_id,
                content=request.content,
            )
        )
    except NotAuthorizedError as e:
        logfire.warn("Unauthorized comment update attempt", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to edit this comment",
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.delete("/comments/{comment_id}", response_model=DeleteCommentResponse)
async def delete_comment(
    comment_id: str,
    delete_comment_use_case: FromDishka[DeleteCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> DeleteCommentResponse:
    """Delete a comment and its replies.

    Allowed for the comment author and for the owner of the video.
    """
    user = _require_user(jwt_service, auth_token, "delete")

    try:
        return await delete_comment_use_case.execute(
            DeleteCommentRequest(comment_id=comment_id, user_id=user.user_id)
        )
    except NotAuthorizedError as e:
        logfire.warn("Unauthorized comment deletion attempt", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to delete this comment",
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
