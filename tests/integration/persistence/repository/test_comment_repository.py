"""Integration tests for PostgresCommentRepository.

These tests need a migrated Postgres database at DATABASE__URL
(``python scripts/run_migrations.py``). They are skipped when it is unset.
"""

import os
from uuid import uuid4

import pytest

from murmur.domain.model import Video
from murmur.domain.repository import CommentRepository, VideoRepository
from murmur.domain.value import CommentId, UserId, VideoId
from tests.conftest import make_comment
from tests.harness import create_env_fixture

pytestmark = pytest.mark.skipif(
    "DATABASE__URL" not in os.environ, reason="DATABASE__URL not set"
)

# Integration test fixture - real persistence
integration_env = create_env_fixture(unmock={"persistence"})


async def seed_video(env) -> VideoId:
    video_id = VideoId(f"it-{uuid4()}")
    video_repo = await env.get(VideoRepository)
    await video_repo.save(Video(id=video_id, owner_id=UserId("owner")))
    return video_id


def unique(prefix: str) -> str:
    return f"{prefix}-{uuid4()}"


class TestCommentRepositoryIntegration:
    """Integration tests for PostgresCommentRepository."""

    @pytest.mark.asyncio
    async def test_save_and_find_round_trip(self, integration_env):
        video_id = await seed_video(integration_env)
        repo = await integration_env.get(CommentRepository)
        comment = make_comment(unique("c"), video_id=video_id, timestamp="00:00:05")

        await repo.save(comment)
        found = await repo.find_by_id(comment.id)

        assert found is not None
        assert found.content == comment.content
        assert found.timestamp == "00:00:05"
        assert found.author_name == comment.author_name

    @pytest.mark.asyncio
    async def test_find_by_video_and_range(self, integration_env):
        video_id = await seed_video(integration_env)
        repo = await integration_env.get(CommentRepository)
        early = make_comment(
            unique("a"), video_id=video_id, timestamp="00:00:10", minute=1
        )
        late = make_comment(
            unique("b"), video_id=video_id, timestamp="00:09:00", minute=2
        )
        await repo.save(late)
        await repo.save(early)

        everything = await repo.find_by_video(video_id)
        in_range = await repo.find_by_timestamp_range(
            video_id, "00:00:00", "00:01:00"
        )

        assert [c.id for c in everything] == [early.id, late.id]
        assert [c.id for c in in_range] == [early.id]

    @pytest.mark.asyncio
    async def test_update_and_cascade_delete(self, integration_env):
        video_id = await seed_video(integration_env)
        repo = await integration_env.get(CommentRepository)
        root = make_comment(unique("r"), video_id=video_id)
        reply = make_comment(unique("p"), video_id=video_id, parent_id=root.id)
        await repo.save(root)
        await repo.save(reply)

        updated = await repo.update_content(root.id, "edited")
        assert updated is not None
        assert updated.content == "edited"
        assert updated.updated_at > root.updated_at

        await repo.delete(root.id)

        assert await repo.find_by_id(reply.id) is None
        assert await repo.find_by_id(CommentId(unique("missing"))) is None
