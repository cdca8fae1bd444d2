"""Unit tests for CommentChannelClient."""

import asyncio

import pytest

from murmur.adapter.error import ChannelExhaustedError
from murmur.adapter.stream import MockCommentStreamTransport
from murmur.application.realtime import CommentChannelClient, backoff_delay_ms
from murmur.config import RealtimeSettings
from murmur.domain.model import CommentCreatedEvent
from murmur.domain.value import ChannelState, VideoId
from tests.conftest import settle


class RecordingSleep:
    """Backoff sleep that returns at once and records what it was asked."""

    def __init__(self, client_ref: list | None = None) -> None:
        self.delays: list[float] = []
        self.errors_seen: list = []
        self.client_ref = client_ref

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self.client_ref:
            self.errors_seen.append(self.client_ref[0].error)


async def block_forever(seconds: float) -> None:
    await asyncio.Event().wait()


@pytest.fixture
def transport() -> MockCommentStreamTransport:
    return MockCommentStreamTransport()


@pytest.fixture
def events() -> list:
    return []


def make_client(transport, events, sleep, **kwargs) -> CommentChannelClient:
    return CommentChannelClient(
        video_id=VideoId("v1"),
        transport=transport,
        on_event=events.append,
        settings=RealtimeSettings(),
        sleep=sleep,
        **kwargs,
    )


class TestBackoffDelay:
    """Tests for backoff_delay_ms."""

    def test_doubles_then_caps(self):
        settings = RealtimeSettings()

        delays = [backoff_delay_ms(attempt, settings) for attempt in range(7)]

        assert delays == [1000, 2000, 4000, 8000, 16000, 30000, 30000]


class TestConnection:
    """Tests for connecting and frame handling."""

    @pytest.mark.asyncio
    async def test_connects_to_video_scoped_path(self, transport, events):
        """The client opens one connection and is connected on acknowledgment."""
        states = []
        client = make_client(
            transport, events, RecordingSleep(), on_state_change=states.append
        )

        client.start()
        await settle()
        assert client.state is ChannelState.CONNECTING
        assert not client.is_connected

        transport.latest.emit("connected", "{}")
        await settle()

        assert client.is_connected
        assert transport.latest.path == "/videos/v1/comments/stream"
        assert len(transport.connections) == 1
        assert states == [ChannelState.CONNECTING, ChannelState.CONNECTED]

        await client.close()

    @pytest.mark.asyncio
    async def test_start_twice_keeps_single_connection(self, transport, events):
        client = make_client(transport, events, RecordingSleep())

        client.start()
        client.start()
        await settle()

        assert len(transport.connections) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_comment_frames_are_parsed_in_order(self, transport, events):
        client = make_client(transport, events, RecordingSleep())
        client.start()
        await settle()

        connection = transport.latest
        connection.emit("connected")
        connection.emit_json(
            "comment", {"type": "created", "comment": {"id": "a", "content": "1"}}
        )
        connection.emit_json(
            "comment", {"type": "deleted", "comment": {"id": "a"}}
        )
        await settle()

        assert [e.type for e in events] == ["created", "deleted"]
        assert isinstance(events[0], CommentCreatedEvent)
        await client.close()

    @pytest.mark.asyncio
    async def test_malformed_frame_is_dropped_and_connection_kept(
        self, transport, events
    ):
        """A comment frame that fails to parse does not break the channel."""
        client = make_client(transport, events, RecordingSleep())
        client.start()
        await settle()

        connection = transport.latest
        connection.emit("connected")
        connection.emit("comment", "not json {")
        connection.emit_json("comment", {"type": "nope"})
        connection.emit_json(
            "comment", {"type": "updated", "comment": {"id": "a", "content": "x"}}
        )
        await settle()

        assert len(events) == 1
        assert client.is_connected
        assert len(transport.connections) == 1
        assert client.error is None
        await client.close()

    @pytest.mark.asyncio
    async def test_unknown_frames_are_ignored(self, transport, events):
        client = make_client(transport, events, RecordingSleep())
        client.start()
        await settle()

        transport.latest.emit("presence", '{"viewers": 3}')
        transport.latest.emit("connected")
        await settle()

        assert events == []
        assert client.is_connected
        await client.close()


class TestReconnect:
    """Tests for backoff and retry exhaustion."""

    @pytest.mark.asyncio
    async def test_backoff_schedule_and_error_only_after_exhaustion(
        self, transport, events
    ):
        """Delays double from 1s; the error appears after the 5th failed retry."""
        client_ref: list = []
        sleep = RecordingSleep(client_ref)
        client = make_client(transport, events, sleep)
        client_ref.append(client)
        transport.refuse_connections = True

        client.start()
        await client.wait()

        assert sleep.delays == [1.0, 2.0, 4.0, 8.0, 16.0]
        assert sleep.errors_seen == [None] * 5
        assert len(transport.connections) == 6
        assert client.state is ChannelState.FAILED
        assert isinstance(client.error, ChannelExhaustedError)
        assert client.error.attempts == 5

    @pytest.mark.asyncio
    async def test_connected_frame_resets_retry_counter(self, transport, events):
        sleep = RecordingSleep()
        client = make_client(transport, events, sleep)
        client.start()
        await settle()

        transport.latest.emit("connected")
        transport.latest.fail()
        await settle()

        # Reconnected after one backoff, previous transport closed first
        assert sleep.delays == [1.0]
        assert client.attempts == 1
        assert len(transport.connections) == 2
        assert transport.open_connections == [transport.latest]

        transport.latest.emit("connected")
        await settle()
        assert client.attempts == 0

        transport.latest.fail()
        await settle()
        assert sleep.delays == [1.0, 1.0]
        await client.close()

    @pytest.mark.asyncio
    async def test_restart_after_failure_resets_counter(self, transport, events):
        client = make_client(transport, events, RecordingSleep())
        transport.refuse_connections = True
        client.start()
        await client.wait()
        assert client.state is ChannelState.FAILED

        transport.refuse_connections = False
        client.start()
        await settle()

        assert client.error is None
        assert client.attempts == 0
        assert client.state is ChannelState.CONNECTING
        await client.close()


class TestClose:
    """Tests for close."""

    @pytest.mark.asyncio
    async def test_close_closes_transport(self, transport, events):
        client = make_client(transport, events, RecordingSleep())
        client.start()
        await settle()
        transport.latest.emit("connected")
        await settle()

        await client.close()

        assert client.state is ChannelState.CLOSED
        assert transport.open_connections == []

    @pytest.mark.asyncio
    async def test_close_cancels_pending_reconnect(self, transport, events):
        """No new connection is made once closed during a backoff wait."""
        client = make_client(transport, events, block_forever)
        client.start()
        await settle()
        transport.latest.fail()
        await settle()
        assert client.state is ChannelState.DISCONNECTED

        await client.close()
        await settle()

        assert client.state is ChannelState.CLOSED
        assert len(transport.connections) == 1
        assert not client.running


class ExplodingTransport(MockCommentStreamTransport):
    """Transport whose connect fails with a non-transport error."""

    def connect(self, path: str):
        raise RuntimeError("misconfigured transport")


class TestUnexpectedErrors:
    """Errors outside the transport contract."""

    @pytest.mark.asyncio
    async def test_unexpected_error_is_surfaced_as_failed(self, events):
        """The client stops in ``failed`` with the error instead of dying silently."""
        sleep = RecordingSleep()
        client = make_client(ExplodingTransport(), events, sleep)

        client.start()
        await client.wait()

        assert client.state is ChannelState.FAILED
        assert isinstance(client.error, RuntimeError)
        assert sleep.delays == []
        assert not client.running
