"""Reconciliation controller for one video's live comment list."""

import asyncio
from typing import Callable, Iterable, Optional

import logfire
from pydantic import BaseModel

from murmur.adapter.stream import CommentStreamTransport
from murmur.config import RealtimeSettings
from murmur.domain.model.comment import Comment, CommentNode
from murmur.domain.model.event import CommentEvent
from murmur.domain.value import ChannelState, CommentId, VideoId

from .channel import CommentChannelClient, Sleep
from .store import CommentTreeStore, Listener, Listeners


class RealtimeCommentsState(BaseModel):
    """Read model handed to UI listeners."""

    video_id: VideoId
    comments: list[CommentNode]
    is_connected: bool
    state: ChannelState
    error: Optional[str] = None


class RealtimeCommentsController:
    """Keeps a comment tree in sync with the server.

    Combines a ``CommentTreeStore`` with a ``CommentChannelClient``. Pushed
    events and manual (optimistic) calls go through the same idempotent tree
    operations, so a comment added locally right after posting is not
    duplicated when its ``created`` event is echoed back.
    """

    def __init__(
        self,
        video_id: VideoId,
        transport: CommentStreamTransport,
        settings: RealtimeSettings,
        initial_comments: Iterable[CommentNode] = (),
        enabled: bool = True,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize controller.

        Args:
            video_id: Video being viewed
            transport: Push channel transport
            settings: Realtime settings
            initial_comments: Server snapshot of the tree at mount time
            enabled: When False no connection is attempted
            sleep: Backoff sleep, replaced in tests
        """
        self.video_id = video_id
        self._enabled = enabled
        self._store = CommentTreeStore(initial_comments)
        self._listeners: Listeners[RealtimeCommentsState] = Listeners()
        self._channel = CommentChannelClient(
            video_id=video_id,
            transport=transport,
            on_event=self._on_event,
            settings=settings,
            on_state_change=self._on_state_change,
            sleep=sleep,
        )
        self._store.subscribe(lambda _: self._notify())

    @property
    def comments(self) -> list[CommentNode]:
        return self._store.comments

    @property
    def is_connected(self) -> bool:
        return self._channel.is_connected

    @property
    def error(self) -> Optional[Exception]:
        return self._channel.error

    @property
    def state(self) -> ChannelState:
        return self._channel.state

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def channel(self) -> CommentChannelClient:
        return self._channel

    def start(self) -> None:
        """Mount: open the push channel if enabled. Returns immediately."""
        if not self._enabled:
            logfire.debug("Realtime comments disabled", video_id=self.video_id)
            return
        self._channel.start()

    async def close(self) -> None:
        """Unmount: close the channel and cancel any pending reconnect."""
        await self._channel.close()

    async def wait(self) -> None:
        await self._channel.wait()

    async def __aenter__(self) -> "RealtimeCommentsController":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def set_enabled(self, enabled: bool) -> None:
        """Gate the channel.

        Disabling closes the transport and cancels pending reconnects.
        Enabling starts a fresh connection with the retry counter reset.
        """
        if enabled == self._enabled:
            return
        self._enabled = enabled
        if enabled:
            self._channel.start()
        else:
            await self._channel.close()

    def add_comment(self, comment: Comment) -> None:
        self._store.add(comment)

    def update_comment(self, comment_id: CommentId, content: str) -> None:
        self._store.update(comment_id, content)

    def remove_comment(self, comment_id: CommentId) -> None:
        self._store.remove(comment_id)

    def set_initial_comments(self, comments: Iterable[CommentNode]) -> None:
        """Supply a server snapshot.

        The tree is replaced wholesale, dropping any local-only comments the
        snapshot does not contain. Listeners are only told if the tree changed.
        """
        snapshot = list(comments)
        logfire.info(
            "Comment snapshot applied",
            video_id=self.video_id,
            roots=len(snapshot),
        )
        self._store.replace(snapshot)

    def subscribe(self, listener: Listener[RealtimeCommentsState]) -> Callable[[], None]:
        """Register a listener called after every tree or connection change.

        Returns:
            Function that removes the listener
        """
        return self._listeners.subscribe(listener)

    def snapshot(self) -> RealtimeCommentsState:
        return RealtimeCommentsState(
            video_id=self.video_id,
            comments=self.comments,
            is_connected=self.is_connected,
            state=self.state,
            error=str(self.error) if self.error else None,
        )

    def _on_event(self, event: CommentEvent) -> None:
        self._store.apply(event)

    def _on_state_change(self, state: ChannelState) -> None:
        self._notify()

    def _notify(self) -> None:
        if len(self._listeners):
            self._listeners.notify(self.snapshot())


class RealtimeCommentsControllerFactory:
    """Builds controllers that share one transport and settings."""

    def __init__(
        self, transport: CommentStreamTransport, settings: RealtimeSettings
    ) -> None:
        self.transport = transport
        self.settings = settings

    def create(
        self,
        video_id: VideoId,
        initial_comments: Iterable[CommentNode] = (),
        enabled: bool = True,
    ) -> RealtimeCommentsController:
        return RealtimeCommentsController(
            video_id=video_id,
            transport=self.transport,
            settings=self.settings,
            initial_comments=initial_comments,
            enabled=enabled,
        )
