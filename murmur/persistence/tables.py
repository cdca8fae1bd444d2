"""SQLAlchemy table definitions for Murmur.

They match the schema defined in Alembic migrations. Identifiers are opaque
strings issued by the application (comments) or by the surrounding
application (videos, users).
"""

from sqlalchemy import Column, ForeignKey, Index, MetaData, String, Table, Text
from sqlalchemy.dialects.postgresql import TIMESTAMP

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# VIDEOS TABLE (owned by the surrounding application; read here)
# ============================================================================
videos_table = Table(
    "videos",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("owner_id", String(64), nullable=False),
    Column("title", Text, nullable=False, server_default=""),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_videos_owner_id", videos_table.c.owner_id)

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", String(64), primary_key=True),
    Column(
        "video_id",
        String(64),
        ForeignKey("videos.id", ondelete="CASCADE"),
        nullable=False,
    ),
    # Deleting a comment removes its replies
    Column(
        "parent_id",
        String(64),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column("author_id", String(64), nullable=False),
    Column("author_name", String(255), nullable=False),  # Denormalized from token
    Column("author_image", Text, nullable=True),
    Column("content", Text, nullable=False),
    Column("timestamp", String(32), nullable=True),  # Playback position marker
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_comments_video_id", comments_table.c.video_id)
Index("idx_comments_parent_id", comments_table.c.parent_id)
Index("idx_comments_created_at", comments_table.c.created_at)
Index(
    "idx_comments_video_id_timestamp",
    comments_table.c.video_id,
    comments_table.c.timestamp,
)
