# src/wellness_forum/schemas/post.py
"""Post-related Pydantic schemas.

``Post`` is the validated entity every store record is parsed into before it
reaches the forum cache; the remaining classes are request/response shapes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from wellness_forum.db.time import as_utc


def parse_tags(raw: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """Split comma-separated tag input into trimmed, non-empty tags.

    Order is preserved. Lists are trimmed the same way.
    """
    if raw is None:
        return []
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    return [str(tag).strip() for tag in items if str(tag).strip()]


def _record_to_dict(cls: type[BaseModel], data: object) -> dict[str, Any]:
    if isinstance(data, dict):
        return dict(data)
    extracted: dict[str, Any] = {}
    for field_name in cls.model_fields:
        if hasattr(data, field_name):
            extracted[field_name] = getattr(data, field_name)
    return extracted


class Post(BaseModel):
    """Forum post as seen by the view layer."""

    id: str
    user_id: str
    title: str
    content: str
    is_anonymous: bool = False
    likes_count: int = Field(0, ge=0)
    comments_count: int = Field(0, ge=0)
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _fill_nullable_columns(cls, data: object) -> object:
        data = _record_to_dict(cls, data)
        # The backing columns are nullable; treat NULL as the column default.
        for counter in ("likes_count", "comments_count"):
            if data.get(counter) is None:
                data[counter] = 0
        if data.get("is_anonymous") is None:
            data["is_anonymous"] = False
        if data.get("tags") is None:
            data["tags"] = []
        if data.get("updated_at") is None and data.get("created_at") is not None:
            data["updated_at"] = data["created_at"]
        for key in ("id", "user_id"):
            if data.get(key) is not None:
                data[key] = str(data[key])
        return data

    @field_validator("created_at", "updated_at")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)

    @property
    def version_stamp(self) -> datetime:
        """Timestamp used to order competing copies of this post."""
        return self.updated_at


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=10_000)
    tags: list[str] = Field(default_factory=list, description="Tags, list or comma-separated")
    is_anonymous: bool = False

    @field_validator("title", "content")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: object) -> list[str]:
        return parse_tags(value)  # type: ignore[arg-type]


class PostUpdate(BaseModel):
    """Partial update of a post's editable fields."""

    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1, max_length=10_000)
    tags: list[str] | None = None
    is_anonymous: bool | None = None

    @field_validator("title", "content")
    @classmethod
    def _reject_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: object) -> list[str] | None:
        if value is None:
            return None
        return parse_tags(value)  # type: ignore[arg-type]

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller actually set."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class PostPageResponse(BaseModel):
    """One page of the filtered and sorted post listing."""

    posts: list[Post]
    page: int
    total_pages: int
    total_count: int
    page_window: list[int]
