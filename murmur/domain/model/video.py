"""Video entity (read-only view of the surrounding application's videos)."""

from datetime import datetime

from pydantic import Field

from murmur.domain.model.comment import utcnow
from murmur.domain.model.common import DomainModel
from murmur.domain.value import UserId, VideoId


class Video(DomainModel):
    """Video that comments belong to.

    Only the fields the comment flow needs: existence and ownership.
    """

    id: VideoId
    owner_id: UserId
    title: str = ""
    created_at: datetime = Field(default_factory=utcnow)
