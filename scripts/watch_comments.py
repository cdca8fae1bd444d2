#!/usr/bin/env python3
"""Follow a video's comments live from the command line.

Fetches the current comment tree, then mounts a realtime controller on the
push channel and reprints the tree whenever it changes. Exits non-zero once
reconnect attempts are exhausted.

    python scripts/watch_comments.py VIDEO_ID [--base-url http://localhost:8000]
"""

import argparse
import asyncio
import sys

import httpx
import logfire

from murmur.adapter.stream import HttpxCommentStreamTransport
from murmur.application.realtime import (
    RealtimeCommentsControllerFactory,
    RealtimeCommentsState,
)
from murmur.application.usecase.comment import GetCommentsResponse
from murmur.config import Settings
from murmur.domain.model import CommentNode
from murmur.domain.value import ChannelState, VideoId
from murmur.util.logging import get_logger, setup_logging
from murmur.util.observability import configure_logfire, instrument_httpx

logger = get_logger(__name__)


def render(nodes: list[CommentNode], depth: int = 0) -> list[str]:
    lines = []
    for node in nodes:
        marker = f"[{node.timestamp}] " if node.timestamp else ""
        author = node.author_name or "anonymous"
        lines.append(f"{'  ' * depth}- {marker}{author}: {node.content}")
        lines.extend(render(node.replies, depth + 1))
    return lines


def print_state(state: RealtimeCommentsState) -> None:
    status = "live" if state.is_connected else state.state.value
    print(f"\n== {state.video_id} ({status}) ==")
    for line in render(state.comments):
        print(line)
    if state.error:
        print(f"!! {state.error}")


async def fetch_snapshot(base_url: str, video_id: str) -> list[CommentNode]:
    async with httpx.AsyncClient(base_url=base_url) as client:
        response = await client.get(f"/videos/{video_id}/comments")
        response.raise_for_status()
        return GetCommentsResponse.model_validate_json(response.content).data


async def watch(video_id: str, base_url: str, settings: Settings) -> int:
    snapshot = await fetch_snapshot(base_url, video_id)
    logger.info(f"Loaded {len(snapshot)} root comments for {video_id}")

    factory = RealtimeCommentsControllerFactory(
        transport=HttpxCommentStreamTransport(base_url=base_url),
        settings=settings.realtime,
    )
    controller = factory.create(VideoId(video_id), initial_comments=snapshot)
    controller.subscribe(print_state)
    print_state(controller.snapshot())

    async with controller:
        await controller.wait()

    return 1 if controller.state is ChannelState.FAILED else 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Watch a video's comments live")
    parser.add_argument("video_id", help="Video to follow")
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="API base URL (default: from settings)",
    )
    args = parser.parse_args()

    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)
    instrument_httpx()

    base_url = args.base_url or settings.api.base_url
    try:
        return asyncio.run(watch(args.video_id, base_url, settings))
    except KeyboardInterrupt:
        return 0
    except httpx.HTTPError as e:
        logfire.error("Could not load comments", video_id=args.video_id, error=str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
