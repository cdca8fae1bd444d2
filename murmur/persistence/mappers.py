"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict

from murmur.domain.model import Comment, Video
from murmur.domain.value import CommentId, UserId, VideoId


def row_to_video(row: Dict[str, Any]) -> Video:
    """Convert database row to Video domain model.

    Args:
        row: Database row as dict

    Returns:
        Video domain model
    """
    return Video(
        id=VideoId(row["id"]),
        owner_id=UserId(row["owner_id"]),
        title=row.get("title") or "",
        created_at=row["created_at"],
    )


def video_to_dict(video: Video) -> Dict[str, Any]:
    """Convert Video domain model to database dict."""
    return video.model_dump()


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model.

    Args:
        row: Database row as dict

    Returns:
        Comment domain model
    """
    return Comment(
        id=CommentId(row["id"]),
        video_id=VideoId(row["video_id"]),
        author_id=UserId(row["author_id"]),
        author_name=row["author_name"],
        author_image=row.get("author_image"),
        content=row["content"],
        timestamp=row.get("timestamp"),
        parent_id=CommentId(row["parent_id"]) if row.get("parent_id") else None,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to database dict.

    Args:
        comment: Comment domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return comment.model_dump()
