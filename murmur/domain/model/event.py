"""Comment change events.

Events are the wire-level notifications pushed to subscribers of a video.
Payloads are validated at the boundary into a closed set of event kinds:

    {"type": "created", "comment": {...full comment...}}
    {"type": "updated", "comment": {"id": "...", "content": "..."}}
    {"type": "deleted", "comment": {"id": "..."}}

Unknown extra fields are ignored.
"""

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from murmur.domain.model.comment import Comment
from murmur.domain.model.common import DomainModel
from murmur.domain.value import CommentId


class CommentPatch(DomainModel):
    """Minimal payload of an ``updated`` event."""

    id: CommentId
    content: str = Field(min_length=1, max_length=10000)
    updated_at: Optional[datetime] = None


class CommentRef(DomainModel):
    """Minimal payload of a ``deleted`` event."""

    id: CommentId


class CommentCreatedEvent(DomainModel):
    type: Literal["created"] = "created"
    comment: Comment


class CommentUpdatedEvent(DomainModel):
    type: Literal["updated"] = "updated"
    comment: CommentPatch


class CommentDeletedEvent(DomainModel):
    type: Literal["deleted"] = "deleted"
    comment: CommentRef


CommentEvent = Annotated[
    Union[CommentCreatedEvent, CommentUpdatedEvent, CommentDeletedEvent],
    Field(discriminator="type"),
]

_event_adapter: TypeAdapter[CommentEvent] = TypeAdapter(CommentEvent)


def parse_comment_event(data: str | bytes) -> CommentEvent:
    """Parse a JSON comment event.

    Raises:
        pydantic.ValidationError: If the payload is not JSON or does not
            match one of the event kinds
    """
    return _event_adapter.validate_json(data)


def dump_comment_event(event: CommentEvent) -> str:
    """Serialize an event to its JSON wire form."""
    return _event_adapter.dump_json(event, by_alias=True).decode("utf-8")
