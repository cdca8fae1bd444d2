"""Application layer DI providers."""

from dishka import Scope, provide

from murmur.adapter.stream import CommentStreamTransport
from murmur.application.realtime import RealtimeCommentsControllerFactory
from murmur.application.usecase.comment import (
    CreateCommentUseCase,
    DeleteCommentUseCase,
    GetCommentsInRangeUseCase,
    GetCommentsUseCase,
    StreamCommentsUseCase,
    UpdateCommentUseCase,
)
from murmur.config import RealtimeSettings
from murmur.domain.service import CommentEventBroker, CommentService
from murmur.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Comment use cases
    @provide(scope=Scope.REQUEST)
    def get_create_comment_use_case(
        self, comment_service: CommentService
    ) -> CreateCommentUseCase:
        """Provide create comment use case."""
        return CreateCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_get_comments_use_case(
        self, comment_service: CommentService
    ) -> GetCommentsUseCase:
        """Provide get comments use case."""
        return GetCommentsUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_get_comments_in_range_use_case(
        self, comment_service: CommentService
    ) -> GetCommentsInRangeUseCase:
        """Provide timestamp range query use case."""
        return GetCommentsInRangeUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_update_comment_use_case(
        self, comment_service: CommentService
    ) -> UpdateCommentUseCase:
        """Provide update comment use case."""
        return UpdateCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_comment_use_case(
        self, comment_service: CommentService
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(comment_service=comment_service)

    # Realtime
    @provide(scope=Scope.APP)
    def get_stream_comments_use_case(
        self, event_broker: CommentEventBroker, settings: RealtimeSettings
    ) -> StreamCommentsUseCase:
        """Provide stream comments use case.

        APP-scoped: a stream outlives the request scope that opened it.
        """
        return StreamCommentsUseCase(event_broker=event_broker, settings=settings)

    @provide(scope=Scope.APP)
    def get_realtime_controller_factory(
        self, transport: CommentStreamTransport, settings: RealtimeSettings
    ) -> RealtimeCommentsControllerFactory:
        """Provide factory for client-side realtime comment controllers."""
        return RealtimeCommentsControllerFactory(transport=transport, settings=settings)
