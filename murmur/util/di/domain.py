"""Domain layer DI providers."""

from dishka import Scope, provide

from murmur.config import AuthSettings
from murmur.domain.repository import CommentRepository, VideoRepository
from murmur.domain.service import CommentEventBroker, CommentService, JWTService
from murmur.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    The event broker is the exception: it is shared by the whole app so that
    writes reach every open push stream.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_event_broker(self) -> CommentEventBroker:
        """Provide the process-wide comment event broker."""
        return CommentEventBroker()

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        video_repository: VideoRepository,
        event_broker: CommentEventBroker,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            video_repository=video_repository,
            event_broker=event_broker,
        )
