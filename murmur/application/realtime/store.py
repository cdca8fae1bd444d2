"""Comment tree store with change listeners."""

from typing import Callable, Generic, Iterable, TypeVar

import logfire

from murmur.domain.model.comment import Comment, CommentNode
from murmur.domain.model.event import (
    CommentCreatedEvent,
    CommentDeletedEvent,
    CommentEvent,
    CommentUpdatedEvent,
)
from murmur.domain.service import comment_tree
from murmur.domain.value import CommentId

T = TypeVar("T")

Listener = Callable[[T], None]


class Listeners(Generic[T]):
    """Ordered subscriber list with explicit unsubscribe."""

    def __init__(self) -> None:
        self._listeners: list[Listener[T]] = []

    def subscribe(self, listener: Listener[T]) -> Callable[[], None]:
        """Add a listener.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, value: T) -> None:
        """Call every listener; one that raises does not stop the others."""
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception as e:
                logfire.error("Listener failed", error=str(e))

    def __len__(self) -> int:
        return len(self._listeners)


class CommentTreeStore:
    """Owns one video's comment tree.

    All changes go through the pure operations in ``comment_tree``;
    listeners receive the new tree after each change that altered it.
    """

    def __init__(self, initial_comments: Iterable[CommentNode] = ()) -> None:
        self._tree: list[CommentNode] = list(initial_comments)
        self._listeners: Listeners[list[CommentNode]] = Listeners()

    @property
    def comments(self) -> list[CommentNode]:
        return list(self._tree)

    def subscribe(self, listener: Listener[list[CommentNode]]) -> Callable[[], None]:
        return self._listeners.subscribe(listener)

    def add(self, comment: Comment) -> None:
        self._commit(comment_tree.add_comment(self._tree, comment))

    def update(self, comment_id: CommentId, content: str) -> None:
        self._commit(comment_tree.update_comment(self._tree, comment_id, content))

    def remove(self, comment_id: CommentId) -> None:
        self._commit(comment_tree.remove_comment(self._tree, comment_id))

    def replace(self, comments: Iterable[CommentNode]) -> None:
        self._commit(list(comments))

    def apply(self, event: CommentEvent) -> None:
        """Apply an inbound event."""
        if isinstance(event, CommentCreatedEvent):
            self.add(event.comment)
        elif isinstance(event, CommentUpdatedEvent):
            self._commit(
                comment_tree.update_comment(
                    self._tree,
                    event.comment.id,
                    event.comment.content,
                    updated_at=event.comment.updated_at,
                )
            )
        elif isinstance(event, CommentDeletedEvent):
            self.remove(event.comment.id)
        else:
            raise TypeError(f"Unknown comment event: {event!r}")

    def _commit(self, tree: list[CommentNode]) -> None:
        if tree == self._tree:
            return
        self._tree = tree
        self._listeners.notify(self.comments)
