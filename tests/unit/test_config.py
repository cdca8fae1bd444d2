"""Unit tests for settings."""

from murmur.config import RealtimeSettings


class TestRealtimeSettings:
    """Tests for RealtimeSettings."""

    def test_stream_path_for_plain_id(self):
        assert RealtimeSettings().stream_path("v1") == "/videos/v1/comments/stream"

    def test_stream_path_encodes_reserved_characters(self):
        """Ids cannot escape their path segment or add a query string."""
        path = RealtimeSettings().stream_path("a/b?c#d")

        assert path == "/videos/a%2Fb%3Fc%23d/comments/stream"
