"""Comment domain service."""

import logfire
from uuid import uuid4

from murmur.domain.error import NotAuthorizedError, NotFoundError, ValidationError
from murmur.domain.model.comment import Comment, CommentNode, utcnow
from murmur.domain.model.event import (
    CommentCreatedEvent,
    CommentDeletedEvent,
    CommentPatch,
    CommentRef,
    CommentUpdatedEvent,
)
from murmur.domain.repository import CommentRepository, VideoRepository
from murmur.domain.value import CommentId, UserId, VideoId

from .base import Service
from .comment_broker import CommentEventBroker
from .comment_tree import build_comment_tree, count_comments


class CommentService(Service):
    """Domain service for comment operations.

    Every successful write is published to the video's subscribers so that
    open push streams receive it.
    """

    def __init__(
        self,
        comment_repository: CommentRepository,
        video_repository: VideoRepository,
        event_broker: CommentEventBroker,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            video_repository: Video repository
            event_broker: Broker that fans events out to push streams
        """
        self.comment_repository = comment_repository
        self.video_repository = video_repository
        self.event_broker = event_broker

    async def create_comment(
        self,
        video_id: VideoId,
        author_id: UserId,
        author_name: str,
        content: str,
        timestamp: str | None = None,
        parent_id: CommentId | None = None,
        author_image: str | None = None,
    ) -> Comment:
        """Create a comment on a video or a reply to another comment.

        Args:
            video_id: Video ID
            author_id: Author user ID
            author_name: Author display name
            content: Comment text
            timestamp: Playback position marker
            parent_id: Parent comment ID for replies (None for top-level)
            author_image: Author avatar URL

        Returns:
            Created comment

        Raises:
            NotFoundError: If the video or parent comment does not exist
            ValidationError: If the parent belongs to another video
        """
        with logfire.span(
            "comment_service.create_comment",
            video_id=video_id,
            author_id=author_id,
            parent_id=parent_id,
        ):
            video = await self.video_repository.find_by_id(video_id)
            if not video:
                logfire.warn("Video not found for comment", video_id=video_id)
                raise NotFoundError("Video", video_id)

            if parent_id:
                parent = await self.comment_repository.find_by_id(parent_id)
                if not parent:
                    logfire.error(
                        "Parent comment not found",
                        parent_id=parent_id,
                        video_id=video_id,
                    )
                    raise NotFoundError("Comment", parent_id)
                if parent.video_id != video_id:
                    logfire.error(
                        "Parent comment does not belong to video",
                        parent_id=parent_id,
                        parent_video_id=parent.video_id,
                        target_video_id=video_id,
                    )
                    raise ValidationError("Parent comment does not belong to this video")

            now = utcnow()
            comment = Comment(
                id=CommentId(str(uuid4())),
                video_id=video_id,
                author_id=author_id,
                author_name=author_name,
                author_image=author_image,
                content=content,
                timestamp=timestamp,
                parent_id=parent_id,
                created_at=now,
                updated_at=now,
            )

            saved = await self.comment_repository.save(comment)
            logfire.info(
                "Comment created",
                comment_id=saved.id,
                video_id=video_id,
                is_reply=saved.is_reply,
            )

            self.event_broker.publish(video_id, CommentCreatedEvent(comment=saved))
            return saved

    async def get_comment_tree(self, video_id: VideoId) -> list[CommentNode]:
        """Get a video's comments as a threaded tree.

        Args:
            video_id: Video ID

        Returns:
            Root comments, oldest first, with replies nested
        """
        with logfire.span("comment_service.get_comment_tree", video_id=video_id):
            comments = await self.comment_repository.find_by_video(video_id)
            tree = build_comment_tree(comments)
            logfire.info(
                "Comment tree built",
                video_id=video_id,
                roots=len(tree),
                total=count_comments(tree),
            )
            return tree

    async def get_comments_in_range(
        self, video_id: VideoId, start: str, end: str
    ) -> list[Comment]:
        """Get comments pinned to playback positions within [start, end].

        Args:
            video_id: Video ID
            start: Inclusive lower bound
            end: Inclusive upper bound

        Returns:
            Comments ordered by timestamp
        """
        with logfire.span(
            "comment_service.get_comments_in_range",
            video_id=video_id,
            start=start,
            end=end,
        ):
            if start > end:
                raise ValidationError("Range start must not be after range end")
            return await self.comment_repository.find_by_timestamp_range(
                video_id, start, end
            )

    async def get_comment_by_id(self, comment_id: CommentId) -> Comment | None:
        """Get a comment by ID.

        Args:
            comment_id: Comment ID

        Returns:
            Comment if found, None otherwise
        """
        with logfire.span("comment_service.get_comment_by_id", comment_id=comment_id):
            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                logfire.warn("Comment not found", comment_id=comment_id)
            return comment

    async def update_content(
        self, comment_id: CommentId, user_id: UserId, content: str
    ) -> Comment:
        """Edit a comment's content. Only the author may edit.

        Args:
            comment_id: Comment ID
            user_id: User attempting the edit
            content: New content

        Returns:
            Updated comment

        Raises:
            NotFoundError: If the comment does not exist
            NotAuthorizedError: If the user is not the author
        """
        with logfire.span(
            "comment_service.update_content",
            comment_id=comment_id,
            content_length=len(content),
        ):
            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                raise NotFoundError("Comment", comment_id)
            if comment.author_id != user_id:
                raise NotAuthorizedError("comment", comment_id, user_id)

            updated = await self.comment_repository.update_content(comment_id, content)
            if updated is None:
                # Removed between the lookup and the update
                raise NotFoundError("Comment", comment_id)

            logfire.info("Comment content updated", comment_id=comment_id)

            if updated.video_id:
                self.event_broker.publish(
                    updated.video_id,
                    CommentUpdatedEvent(
                        comment=CommentPatch(
                            id=updated.id,
                            content=updated.content,
                            updated_at=updated.updated_at,
                        )
                    ),
                )
            return updated

    async def delete_comment(self, comment_id: CommentId, user_id: UserId) -> Comment:
        """Delete a comment and its replies.

        The author may delete their own comment; the video owner may delete
        any comment on their video.

        Args:
            comment_id: Comment ID
            user_id: User attempting the deletion

        Returns:
            The deleted comment

        Raises:
            NotFoundError: If the comment does not exist
            NotAuthorizedError: If the user is neither author nor video owner
        """
        with logfire.span(
            "comment_service.delete_comment", comment_id=comment_id, user_id=user_id
        ):
            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                raise NotFoundError("Comment", comment_id)

            if comment.author_id != user_id:
                video = (
                    await self.video_repository.find_by_id(comment.video_id)
                    if comment.video_id
                    else None
                )
                if not video or video.owner_id != user_id:
                    logfire.warn(
                        "Unauthorized comment deletion",
                        comment_id=comment_id,
                        user_id=user_id,
                    )
                    raise NotAuthorizedError("comment", comment_id, user_id)

            await self.comment_repository.delete(comment_id)
            logfire.info("Comment deleted", comment_id=comment_id)

            if comment.video_id:
                self.event_broker.publish(
                    comment.video_id,
                    CommentDeletedEvent(comment=CommentRef(id=comment.id)),
                )
            return comment
