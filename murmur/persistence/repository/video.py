"""PostgreSQL implementation of Video repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from murmur.domain.model import Video
from murmur.domain.repository import VideoRepository
from murmur.domain.value import VideoId
from murmur.persistence.mappers import row_to_video, video_to_dict
from murmur.persistence.tables import videos_table


class PostgresVideoRepository(VideoRepository):
    """PostgreSQL implementation of VideoRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, video_id: VideoId) -> Optional[Video]:
        """Find a video by ID."""
        stmt = select(videos_table).where(videos_table.c.id == video_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_video(row._asdict()) if row else None

    async def save(self, video: Video) -> Video:
        """Insert a video, or update its owner and title if it exists."""
        video_dict = video_to_dict(video)
        stmt = insert(videos_table).values(**video_dict)
        stmt = stmt.on_conflict_do_update(
            index_elements=[videos_table.c.id],
            set_={"owner_id": stmt.excluded.owner_id, "title": stmt.excluded.title},
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return video
