# src/wellness_forum/models/post.py
"""SQLAlchemy models for forum posts."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wellness_forum.db.session import Base
from wellness_forum.db.time import utcnow


def new_record_id() -> str:
    """Return a fresh UUID4 string used as a record identifier."""
    return str(uuid.uuid4())


class ForumPost(Base):
    """Community forum post.

    Counters are denormalized onto the row and only ever changed through
    atomic ``UPDATE ... SET col = col + n`` statements.
    """

    __tablename__ = "forum_post"
    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="ck_forum_post_likes_nonneg"),
        CheckConstraint("comments_count >= 0", name="ck_forum_post_comments_nonneg"),
        Index("ix_forum_post_created_at", "created_at"),
        Index("ix_forum_post_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_record_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    likes_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    comments_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Ordered list of strings; JSON keeps the order across dialects.
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
