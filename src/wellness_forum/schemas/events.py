# src/wellness_forum/schemas/events.py
"""Change notifications pushed by the store to its subscribers."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field

POSTS_TABLE: Final = "posts"
COMMENTS_TABLE: Final = "comments"

Table = Literal["posts", "comments"]


class EventKind(StrEnum):
    """Kind of row change carried by a ``ChangeEvent``."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ChangeEvent(BaseModel):
    """A remote insert, update or delete of one record.

    ``record`` holds the raw row; for deletes it may only carry ``id`` (and
    ``post_id`` for comments).
    """

    table: Table
    kind: EventKind
    record: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)
