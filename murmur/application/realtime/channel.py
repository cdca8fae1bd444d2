"""Event channel client for a video's comment push stream.

One client keeps at most one live transport connection. Connecting,
reading frames and backing off all happen inside a single task, so a
reconnect always starts after the previous connection has been closed.

State machine::

    disconnected --start--> connecting --connected frame--> connected
    connected|connecting --transport error--> disconnected
    disconnected --backoff elapsed, attempts < max--> connecting
    disconnected --attempts >= max--> failed     (until started again)
    any --unexpected error--> failed
    any --close--> closed
"""

import asyncio
from typing import Awaitable, Callable, Optional

import logfire
from pydantic import ValidationError

from murmur.adapter.error import ChannelExhaustedError, ChannelTransportError
from murmur.adapter.stream import CommentStreamTransport, ServerSentEvent
from murmur.config import RealtimeSettings
from murmur.domain.model.event import CommentEvent, parse_comment_event
from murmur.domain.value import ChannelState, FrameType, VideoId

Sleep = Callable[[float], Awaitable[None]]


def backoff_delay_ms(attempt: int, settings: RealtimeSettings) -> int:
    """Reconnect delay for a zero-based attempt number."""
    return min(settings.base_delay_ms * 2**attempt, settings.max_delay_ms)


class CommentChannelClient:
    """Subscribes to one video's comment stream and reports parsed events."""

    def __init__(
        self,
        video_id: VideoId,
        transport: CommentStreamTransport,
        on_event: Callable[[CommentEvent], None],
        settings: RealtimeSettings,
        on_state_change: Optional[Callable[[ChannelState], None]] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize channel client.

        Args:
            video_id: Video whose stream to follow
            transport: Transport used to open connections
            on_event: Called with each valid comment event, in delivery order
            settings: Backoff and endpoint settings
            on_state_change: Called whenever the state changes
            sleep: Coroutine used to wait out backoff delays (seconds)
        """
        self.video_id = video_id
        self.transport = transport
        self.settings = settings
        self._on_event = on_event
        self._on_state_change = on_state_change
        self._sleep = sleep

        self._task: Optional[asyncio.Task] = None
        self._state = ChannelState.DISCONNECTED
        self._attempts = 0
        self._error: Optional[Exception] = None

    @property
    def path(self) -> str:
        return self.settings.stream_path(self.video_id)

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ChannelState.CONNECTED

    @property
    def error(self) -> Optional[Exception]:
        return self._error

    @property
    def attempts(self) -> int:
        """Consecutive failed reconnects since the last ``connected`` frame."""
        return self._attempts

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start connecting in the background.

        Does nothing if already running. Starting again after ``failed`` or
        ``closed`` resets the retry counter and the error.
        """
        if self.running:
            return
        self._attempts = 0
        self._error = None
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"comment-channel:{self.video_id}"
        )

    async def close(self) -> None:
        """Close the connection and cancel any pending reconnect."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._set_state(ChannelState.CLOSED)

    async def wait(self) -> None:
        """Wait until the client stops on its own (retries exhausted or failed)."""
        if self._task is not None:
            await asyncio.shield(self._task)

    async def _run(self) -> None:
        try:
            await self._connect_loop()
        except Exception as e:
            # Not a transport failure; retrying would hit it again
            self._error = e
            logfire.error(
                "Comment stream stopped by unexpected error",
                video_id=self.video_id,
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=True,
            )
            self._set_state(ChannelState.FAILED)

    async def _connect_loop(self) -> None:
        while True:
            self._set_state(ChannelState.CONNECTING)
            try:
                async with self.transport.connect(self.path) as frames:
                    async for frame in frames:
                        self._handle_frame(frame)
                error = ChannelTransportError("Comment stream ended")
            except ChannelTransportError as e:
                error = e

            self._set_state(ChannelState.DISCONNECTED)
            logfire.warn(
                "Comment stream disconnected",
                video_id=self.video_id,
                attempts=self._attempts,
                error=str(error),
            )

            if self._attempts >= self.settings.max_attempts:
                self._error = ChannelExhaustedError(self._attempts)
                logfire.error(
                    "Comment stream reconnect attempts exhausted",
                    video_id=self.video_id,
                    attempts=self._attempts,
                )
                self._set_state(ChannelState.FAILED)
                return

            delay = backoff_delay_ms(self._attempts, self.settings)
            self._attempts += 1
            logfire.info(
                "Comment stream reconnect scheduled",
                video_id=self.video_id,
                attempt=self._attempts,
                delay_ms=delay,
            )
            await self._sleep(delay / 1000)

    def _handle_frame(self, frame: ServerSentEvent) -> None:
        if frame.event == FrameType.CONNECTED:
            self._attempts = 0
            self._error = None
            self._set_state(ChannelState.CONNECTED)
            logfire.info("Comment stream connected", video_id=self.video_id)
        elif frame.event == FrameType.COMMENT:
            try:
                event = parse_comment_event(frame.data)
            except ValidationError as e:
                logfire.error(
                    "Malformed comment frame dropped",
                    video_id=self.video_id,
                    error=str(e),
                )
                return
            self._on_event(event)
        else:
            logfire.debug(
                "Ignoring unknown frame", video_id=self.video_id, event=frame.event
            )

    def _set_state(self, state: ChannelState) -> None:
        if state is self._state:
            return
        self._state = state
        if self._on_state_change is not None:
            self._on_state_change(state)
