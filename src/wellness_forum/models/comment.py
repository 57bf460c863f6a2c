# src/wellness_forum/models/comment.py
"""SQLAlchemy models for comments and replies on forum posts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wellness_forum.db.session import Base
from wellness_forum.db.time import utcnow

from .post import new_record_id


class ForumComment(Base):
    """Comment on a post; ``parent_id`` set means it is a reply."""

    __tablename__ = "forum_comment"
    __table_args__ = (
        Index("ix_forum_comment_post_id", "post_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_record_id)
    post_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("forum_post.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Top-level comments have parent_id = NULL.
    parent_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("forum_comment.id", ondelete="CASCADE"),
        nullable=True,
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    likes_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
