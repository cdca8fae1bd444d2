"""Comment push channel transport providers."""

from dishka import Scope, provide

from murmur.adapter.stream import CommentStreamTransport, HttpxCommentStreamTransport
from murmur.config import Settings
from murmur.util.di.base import ProviderBase


class StreamProvider(ProviderBase):
    """Stream transport component base."""

    __mock_component__ = "stream"


class ProdStreamProvider(StreamProvider):
    """Production transport: event-stream over httpx against this API."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_comment_stream_transport(self, settings: Settings) -> CommentStreamTransport:
        """Provide httpx-based comment stream transport."""
        return HttpxCommentStreamTransport(base_url=settings.api.base_url)
