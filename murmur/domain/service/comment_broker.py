"""Per-video fan-out of comment events.

The broker is an explicit registry object, provided as an APP-scoped
singleton, so every request that writes a comment and every open push
stream for the same video see the same subscriber list.
"""

import asyncio
from collections import defaultdict
from typing import Callable, Optional

import logfire

from murmur.domain.model.event import CommentEvent
from murmur.domain.value import VideoId

EventCallback = Callable[[CommentEvent], None]
Unsubscribe = Callable[[], None]


class CommentEventBroker:
    """Registry of comment event subscribers keyed by video."""

    def __init__(self) -> None:
        self._subscribers: dict[VideoId, list[EventCallback]] = defaultdict(list)

    def subscribe(self, video_id: VideoId, callback: EventCallback) -> Unsubscribe:
        """Register a callback for one video's events.

        Args:
            video_id: Video to follow
            callback: Called synchronously with each published event

        Returns:
            Function that removes the callback; calling it twice is harmless
        """
        self._subscribers[video_id].append(callback)
        logfire.debug(
            "Comment subscriber added",
            video_id=video_id,
            subscribers=len(self._subscribers[video_id]),
        )

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(video_id)
            if not callbacks or callback not in callbacks:
                return
            callbacks.remove(callback)
            if not callbacks:
                del self._subscribers[video_id]
            logfire.debug("Comment subscriber removed", video_id=video_id)

        return unsubscribe

    def publish(self, video_id: VideoId, event: CommentEvent) -> int:
        """Deliver an event to every subscriber of a video, in subscription order.

        A subscriber that raises is logged and skipped; the rest still
        receive the event.

        Args:
            video_id: Video the event belongs to
            event: Event to deliver

        Returns:
            Number of subscribers that received the event
        """
        delivered = 0
        for callback in list(self._subscribers.get(video_id, [])):
            try:
                callback(event)
                delivered += 1
            except Exception as e:
                logfire.error(
                    "Comment subscriber failed",
                    video_id=video_id,
                    event_type=event.type,
                    error=str(e),
                )
        logfire.info(
            "Comment event published",
            video_id=video_id,
            event_type=event.type,
            comment_id=event.comment.id,
            delivered=delivered,
        )
        return delivered

    def subscriber_count(self, video_id: VideoId) -> int:
        return len(self._subscribers.get(video_id, []))

    def open_stream(
        self, video_id: VideoId, max_buffered: int = 0
    ) -> "CommentEventStream":
        """Subscribe a queue-backed stream, for use by the push endpoint.

        Args:
            video_id: Video to follow
            max_buffered: Events held for a slow reader before the stream is
                dropped; 0 means unbounded
        """
        stream = CommentEventStream(video_id, max_buffered)
        stream.attach(self.subscribe(video_id, stream.push))
        return stream


class CommentEventStream:
    """Buffered view of one video's events for a single push connection.

    Use as a context manager so the subscription is released when the
    connection ends. A reader that falls more than ``max_buffered`` events
    behind is unsubscribed and marked ``overflowed``; it should end the
    connection so the client reconnects and refetches.
    """

    def __init__(self, video_id: VideoId, max_buffered: int = 0) -> None:
        self.video_id = video_id
        self.overflowed = False
        self._queue: asyncio.Queue[CommentEvent] = asyncio.Queue(maxsize=max_buffered)
        self._unsubscribe: Optional[Unsubscribe] = None

    def attach(self, unsubscribe: Unsubscribe) -> None:
        self._unsubscribe = unsubscribe

    @property
    def exhausted(self) -> bool:
        """Overflowed and every buffered event has been read."""
        return self.overflowed and self._queue.empty()

    def push(self, event: CommentEvent) -> None:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logfire.warn(
                "Comment stream buffer full, dropping subscriber",
                video_id=self.video_id,
                buffered=self._queue.qsize(),
            )
            self.overflowed = True
            self.close()

    async def next(self, timeout: Optional[float] = None) -> Optional[CommentEvent]:
        """Wait for the next event.

        Returns:
            The event, or None if ``timeout`` seconds pass without one
        """
        try:
            return await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self) -> "CommentEventStream":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
