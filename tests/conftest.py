"""Test configuration and fixtures."""

import asyncio
from datetime import datetime, timedelta, timezone

import logfire
import pytest

from murmur.domain.model import Comment, CommentNode
from murmur.domain.value import CommentId, UserId, VideoId

# Console-only telemetry; instrumentation calls in create_app need this first
logfire.configure(send_to_logfire=False, console=False)

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


async def settle(rounds: int = 20) -> None:
    """Let background tasks run until they block."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def make_comment(
    comment_id: str,
    content: str = "hello",
    parent_id: str | None = None,
    video_id: str = "v1",
    author_id: str = "u1",
    timestamp: str | None = None,
    minute: int = 0,
) -> Comment:
    """Helper to build a comment with deterministic timestamps.

    Args:
        comment_id: Comment ID
        content: Comment text
        parent_id: Parent comment ID for replies
        video_id: Video ID
        author_id: Author user ID
        timestamp: Playback position marker
        minute: Offset from BASE_TIME for created_at/updated_at

    Returns:
        Comment
    """
    at = BASE_TIME + timedelta(minutes=minute)
    return Comment(
        id=CommentId(comment_id),
        video_id=VideoId(video_id),
        author_id=UserId(author_id),
        author_name=f"user-{author_id}",
        content=content,
        timestamp=timestamp,
        parent_id=CommentId(parent_id) if parent_id else None,
        created_at=at,
        updated_at=at,
    )


def make_node(
    comment_id: str,
    content: str = "hello",
    replies: list[CommentNode] | None = None,
    parent_id: str | None = None,
) -> CommentNode:
    """Helper to build a tree node."""
    return CommentNode.from_comment(
        make_comment(comment_id, content=content, parent_id=parent_id),
        replies=replies or [],
    )


@pytest.fixture
def thread() -> list[CommentNode]:
    """Root c1 with reply c2 (which has reply c3), and root c4."""
    return [
        make_node(
            "c1",
            "root one",
            replies=[
                make_node(
                    "c2",
                    "reply",
                    parent_id="c1",
                    replies=[make_node("c3", "nested", parent_id="c2")],
                )
            ],
        ),
        make_node("c4", "root two"),
    ]
