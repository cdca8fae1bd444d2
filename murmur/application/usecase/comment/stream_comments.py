"""Stream comments use case.

Produces the event-stream body for one video's push channel:

    event: connected      sent once the subscription is live
    data: {}

    event: comment        one per change, data is the JSON comment event
    data: {"type": "created", "comment": {...}}

    : ping                keep-alive while idle
"""

from typing import AsyncIterator, Awaitable, Callable, Optional

import logfire
from pydantic import BaseModel

from murmur.adapter.stream import encode_comment, encode_event
from murmur.config import RealtimeSettings
from murmur.domain.model import dump_comment_event
from murmur.domain.service import CommentEventBroker
from murmur.domain.value import FrameType, VideoId

DisconnectCheck = Callable[[], Awaitable[bool]]


class StreamCommentsRequest(BaseModel):
    """Stream comments request."""

    video_id: str


class StreamCommentsUseCase:
    """Use case for serving a video's comment push channel."""

    def __init__(
        self, event_broker: CommentEventBroker, settings: RealtimeSettings
    ) -> None:
        """Initialize stream comments use case.

        Args:
            event_broker: Shared comment event broker
            settings: Realtime settings (heartbeat interval, buffer size)
        """
        self.event_broker = event_broker
        self.settings = settings

    async def execute(
        self,
        request: StreamCommentsRequest,
        is_disconnected: Optional[DisconnectCheck] = None,
    ) -> AsyncIterator[str]:
        """Yield event-stream chunks until the client goes away.

        The stream also ends once the reader falls too far behind and its
        buffered events have been sent.

        The subscription is registered before the ``connected`` frame is
        sent, so no event published after the client sees it is missed.

        Args:
            request: Stream request with video ID
            is_disconnected: Polled between frames; the stream ends once it
                returns True

        Yields:
            Encoded event-stream frames
        """
        video_id = VideoId(request.video_id)
        with self.event_broker.open_stream(
            video_id, self.settings.stream_buffer_size
        ) as stream:
            logfire.info(
                "Comment stream opened",
                video_id=video_id,
                subscribers=self.event_broker.subscriber_count(video_id),
            )
            try:
                yield encode_event(FrameType.CONNECTED.value, "{}")

                while True:
                    if is_disconnected is not None and await is_disconnected():
                        break
                    if stream.exhausted:
                        # Client reconnects and refetches what it missed
                        break
                    event = await stream.next(timeout=self.settings.heartbeat_seconds)
                    if event is None:
                        yield encode_comment("ping")
                        continue
                    yield encode_event(
                        FrameType.COMMENT.value, dump_comment_event(event)
                    )
            finally:
                logfire.info("Comment stream closed", video_id=video_id)
