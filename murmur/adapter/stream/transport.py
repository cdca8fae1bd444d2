"""Push channel transports.

A transport opens one connection to a video-scoped event stream and yields
decoded frames. Connection failures, non-2xx responses and the server
closing the stream all surface as ``ChannelTransportError`` so the channel
client has a single error to back off on.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import httpx
import logfire

from murmur.adapter.error import ChannelTransportError
from murmur.adapter.stream.sse import ServerSentEvent, SSEDecoder

FrameStream = AsyncIterator[ServerSentEvent]


class CommentStreamTransport(ABC):
    """Base class for comment push channel transports.

    Provides type distinction for dependency injection.
    """

    @abstractmethod
    def connect(self, path: str) -> Any:
        """Open a connection to ``path``.

        Returns:
            Async context manager yielding an async iterator of frames.
            Leaving the context closes the connection.

        Raises:
            ChannelTransportError: On connect failure, or from the iterator
                when the connection drops or ends
        """
        pass


class HttpxCommentStreamTransport(CommentStreamTransport):
    """Event-stream transport over an httpx streaming GET."""

    def __init__(
        self,
        base_url: str,
        headers: Optional[dict[str, str]] = None,
        connect_timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize transport.

        Args:
            base_url: API base URL, e.g. http://localhost:8000
            headers: Extra request headers (cookies, auth)
            connect_timeout: Seconds to wait for the connection; reads never
                time out, liveness comes from the connection itself
            transport: Custom httpx transport, e.g. httpx.MockTransport in tests
        """
        self.base_url = base_url
        self.headers = headers or {}
        self.timeout = httpx.Timeout(None, connect=connect_timeout)
        self.transport = transport

    @asynccontextmanager
    async def connect(self, path: str):
        headers = {
            "Accept": "text/event-stream",
            "Cache-Control": "no-cache",
            **self.headers,
        }
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                async with client.stream("GET", path, headers=headers) as response:
                    if response.status_code >= 400:
                        raise ChannelTransportError(
                            f"Comment stream returned HTTP {response.status_code}"
                        )
                    logfire.info("Comment stream opened", path=path)
                    yield self._frames(response)
        # InvalidURL is not an HTTPError; socket failures can surface as OSError
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
            raise ChannelTransportError(f"Comment stream failed: {e}") from e

    @staticmethod
    async def _frames(response: httpx.Response) -> FrameStream:
        decoder = SSEDecoder()
        async for line in response.aiter_lines():
            frame = decoder.feed_line(line)
            if frame is not None:
                yield frame
        raise ChannelTransportError("Comment stream closed by server")


class MockStreamConnection:
    """One connection opened through ``MockCommentStreamTransport``.

    Tests drive it like a server: ``emit`` frames, ``fail`` the connection.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self.closed = False
        self._queue: asyncio.Queue[ServerSentEvent | Exception] = asyncio.Queue()

    def emit(self, event: str, data: str = "") -> None:
        self._queue.put_nowait(ServerSentEvent(event=event, data=data))

    def emit_json(self, event: str, payload: Any) -> None:
        self.emit(event, json.dumps(payload))

    def fail(self, message: str = "connection lost") -> None:
        self._queue.put_nowait(ChannelTransportError(message))

    async def frames(self) -> FrameStream:
        while True:
            item = await self._queue.get()
            if isinstance(item, Exception):
                raise item
            yield item


class MockCommentStreamTransport(CommentStreamTransport):
    """In-memory transport for testing and local development.

    Records every connection attempt. Set ``refuse_connections`` to make
    attempts fail immediately.
    """

    def __init__(self) -> None:
        self.connections: list[MockStreamConnection] = []
        self.refuse_connections = False

    @property
    def latest(self) -> MockStreamConnection:
        return self.connections[-1]

    @property
    def open_connections(self) -> list[MockStreamConnection]:
        return [c for c in self.connections if not c.closed]

    @asynccontextmanager
    async def connect(self, path: str):
        connection = MockStreamConnection(path)
        self.connections.append(connection)
        try:
            if self.refuse_connections:
                raise ChannelTransportError("connection refused")
            yield connection.frames()
        finally:
            connection.closed = True
