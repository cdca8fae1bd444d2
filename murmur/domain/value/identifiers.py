"""Strongly typed identifiers for Murmur domain entities.

Identifiers are opaque strings issued by the surrounding application
(videos, users) or by this service (comments). NewType keeps them from
being mixed up.
"""

from typing import NewType

CommentId = NewType("CommentId", str)
VideoId = NewType("VideoId", str)
UserId = NewType("UserId", str)
