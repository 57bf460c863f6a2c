# src/wellness_forum/schemas/comment.py
"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from wellness_forum.db.time import as_utc

from .post import _record_to_dict


class Comment(BaseModel):
    """Comment or reply on a forum post."""

    id: str
    post_id: str
    parent_id: str | None = None
    user_id: str
    content: str
    is_anonymous: bool = False
    likes_count: int = Field(0, ge=0)
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _fill_nullable_columns(cls, data: object) -> object:
        data = _record_to_dict(cls, data)
        if data.get("likes_count") is None:
            data["likes_count"] = 0
        if data.get("is_anonymous") is None:
            data["is_anonymous"] = False
        for key in ("id", "post_id", "parent_id", "user_id"):
            if data.get(key) is not None:
                data[key] = str(data[key])
        return data

    @field_validator("created_at", "updated_at")
    @classmethod
    def _normalize_timestamp(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None

    @property
    def version_stamp(self) -> datetime:
        """Timestamp used to order competing copies of this comment."""
        return self.updated_at or self.created_at


class CommentNode(Comment):
    """Top-level comment together with its direct replies."""

    replies: list[Comment] = Field(default_factory=list)


class CommentCreate(BaseModel):
    """Schema for creating a comment or a reply."""

    content: str = Field(..., min_length=1, max_length=10_000)
    parent_id: str | None = Field(None, description="Comment being replied to")
    is_anonymous: bool = False

    @field_validator("content")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value
