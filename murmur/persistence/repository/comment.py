"""PostgreSQL implementation of Comment repository."""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from murmur.domain.model import Comment
from murmur.domain.model.comment import utcnow
from murmur.domain.repository import CommentRepository
from murmur.domain.value import CommentId, VideoId
from murmur.persistence.mappers import comment_to_dict, row_to_comment
from murmur.persistence.tables import comments_table


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        stmt = select(comments_table).where(comments_table.c.id == comment_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def find_by_video(self, video_id: VideoId) -> List[Comment]:
        """Find all comments for a video, oldest first."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.video_id == video_id)
            .order_by(comments_table.c.created_at, comments_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def find_by_timestamp_range(
        self, video_id: VideoId, start: str, end: str
    ) -> List[Comment]:
        """Find timestamped comments within [start, end]."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.video_id == video_id)
            .where(comments_table.c.timestamp.is_not(None))
            .where(comments_table.c.timestamp >= start)
            .where(comments_table.c.timestamp <= end)
            .order_by(comments_table.c.timestamp, comments_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update)."""
        comment_dict = comment_to_dict(comment)
        existing = await self.find_by_id(comment.id)

        if existing:
            stmt = (
                comments_table.update()
                .where(comments_table.c.id == comment.id)
                .values(**comment_dict)
            )
        else:
            stmt = comments_table.insert().values(**comment_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return comment

    async def update_content(
        self, comment_id: CommentId, content: str
    ) -> Optional[Comment]:
        """Update the content of a comment."""
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .values(content=content, updated_at=utcnow())
            .returning(comments_table)
        )

        result = await self.session.execute(stmt)
        row = result.fetchone()

        if row is None:
            return None

        await self.session.flush()
        return row_to_comment(row._asdict())

    async def delete(self, comment_id: CommentId) -> None:
        """Delete a comment (hard delete). Replies go with it via ON DELETE CASCADE."""
        stmt = comments_table.delete().where(comments_table.c.id == comment_id)
        await self.session.execute(stmt)
        await self.session.flush()
