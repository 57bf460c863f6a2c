"""SQLAlchemy-backed implementation of the forum store."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wellness_forum.forum.actor import Actor
from wellness_forum.forum.errors import (
    PermissionDeniedError,
    RecordNotFoundError,
    ReplyDepthError,
    StoreError,
)
from wellness_forum.models import ForumComment, ForumPost
from wellness_forum.schemas.comment import Comment, CommentCreate
from wellness_forum.schemas.events import (
    COMMENTS_TABLE,
    POSTS_TABLE,
    ChangeEvent,
    EventKind,
    Table,
)
from wellness_forum.schemas.post import Post, PostCreate, PostUpdate

from .base import ChangeFeed, Counter, EventHandler, Subscription, get_change_feed

logger = logging.getLogger(__name__)

T = TypeVar("T")

_POST_ORDER_COLUMNS = {
    "created_at": ForumPost.created_at,
    "updated_at": ForumPost.updated_at,
    "likes_count": ForumPost.likes_count,
    "comments_count": ForumPost.comments_count,
    "title": ForumPost.title,
}
_COMMENT_ORDER_COLUMNS = {
    "created_at": ForumComment.created_at,
    "updated_at": ForumComment.updated_at,
    "likes_count": ForumComment.likes_count,
}
_COUNTERS: dict[str, object] = {
    "likes_count": ForumPost.likes_count,
    "comments_count": ForumPost.comments_count,
}


def _order(columns: dict, order_by: str, descending: bool, tie_breaker) -> list:
    try:
        column = columns[order_by]
    except KeyError as err:
        raise StoreError(f"Cannot order by {order_by!r}") from err
    if descending:
        return [column.desc(), tie_breaker.desc()]
    return [column.asc(), tie_breaker.asc()]


class SqlForumStore:
    """Forum store over a SQLAlchemy session.

    Session work runs on a worker thread so callers awaiting a store call can
    give up on it. Calls are serialized on the session: one that its caller
    abandoned still runs to completion before the next one starts.

    Every mutation commits before the matching change event is published on
    the feed, so subscribers never see uncommitted rows. Events are delivered
    on the caller's event loop.
    """

    def __init__(self, db: Session, feed: ChangeFeed | None = None) -> None:
        self.db = db
        self.feed = feed or get_change_feed()
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None

    # -- helpers -----------------------------------------------------------

    async def _run(self, work: Callable[..., T], *args: Any) -> T:
        self._loop = asyncio.get_running_loop()
        return await asyncio.to_thread(self._serialized, work, *args)

    def _serialized(self, work: Callable[..., T], *args: Any) -> T:
        with self._lock:
            return work(*args)

    def _publish(self, table: Table, kind: EventKind, record: dict) -> None:
        event = ChangeEvent(table=table, kind=kind, record=record)
        if self._loop is None:
            self.feed.publish(event)
        else:
            self._loop.call_soon_threadsafe(self.feed.publish, event)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("Store commit failed: %s", exc)
            raise StoreError("Store write failed") from exc

    def _publish_post(self, post_id: str) -> Post:
        post = Post.model_validate(self._post_row(post_id))
        self._publish(POSTS_TABLE, EventKind.UPDATE, post.model_dump())
        return post

    def _bump(self, post_id: str, counter: Counter, delta: int) -> None:
        """Add ``delta`` to a counter inside the UPDATE statement itself.

        Counters never drop below zero.
        """
        column = _COUNTERS.get(counter)
        if column is None:
            raise StoreError(f"Unknown counter {counter!r}")
        stmt = (
            update(ForumPost)
            .where(ForumPost.id == post_id, column + delta >= 0)
            .values({counter: column + delta})
            .execution_options(synchronize_session=False)
        )
        try:
            self.db.execute(stmt)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Failed to update {counter}") from exc

    def _post_row(self, post_id: str) -> ForumPost:
        row = self.db.get(ForumPost, post_id, populate_existing=True)
        if row is None:
            raise RecordNotFoundError(f"Post {post_id} not found")
        return row

    def _comment_row(self, comment_id: str) -> ForumComment:
        row = self.db.get(ForumComment, comment_id, populate_existing=True)
        if row is None:
            raise RecordNotFoundError(f"Comment {comment_id} not found")
        return row

    def _owned_post_row(self, post_id: str, actor: Actor, verb: str) -> ForumPost:
        row = self._post_row(post_id)
        if not actor.owns(row):
            raise PermissionDeniedError(f"You can only {verb} your own posts")
        return row

    # -- reads ---------------------------------------------------------------

    def _list_posts(self, order_by: str, descending: bool) -> list[Post]:
        stmt = select(ForumPost).order_by(
            *_order(_POST_ORDER_COLUMNS, order_by, descending, ForumPost.id)
        )
        try:
            rows = self.db.scalars(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreError("Failed to list posts") from exc
        return [Post.model_validate(row) for row in rows]

    async def list_posts(self, order_by: str = "created_at", descending: bool = True) -> list[Post]:
        return await self._run(self._list_posts, order_by, descending)

    def _list_comments(self, post_id: str, order_by: str, descending: bool) -> list[Comment]:
        stmt = (
            select(ForumComment)
            .where(ForumComment.post_id == post_id)
            .order_by(*_order(_COMMENT_ORDER_COLUMNS, order_by, descending, ForumComment.id))
        )
        try:
            rows = self.db.scalars(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreError("Failed to list comments") from exc
        return [Comment.model_validate(row) for row in rows]

    async def list_comments(
        self, post_id: str, order_by: str = "created_at", descending: bool = False
    ) -> list[Comment]:
        return await self._run(self._list_comments, post_id, order_by, descending)

    def _get_post(self, post_id: str) -> Post:
        return Post.model_validate(self._post_row(post_id))

    async def get_post(self, post_id: str) -> Post:
        return await self._run(self._get_post, post_id)

    def _get_comment(self, comment_id: str) -> Comment:
        return Comment.model_validate(self._comment_row(comment_id))

    async def get_comment(self, comment_id: str) -> Comment:
        return await self._run(self._get_comment, comment_id)

    # -- writes ----------------------------------------------------------------

    def _create_post(self, fields: PostCreate, actor: Actor) -> Post:
        row = ForumPost(
            user_id=actor.user_id,
            title=fields.title.strip(),
            content=fields.content.strip(),
            tags=list(fields.tags),
            is_anonymous=fields.is_anonymous,
            likes_count=0,
            comments_count=0,
        )
        self.db.add(row)
        self._commit()
        self.db.refresh(row)

        post = Post.model_validate(row)
        logger.info("Created post %s", post.id)
        self._publish(POSTS_TABLE, EventKind.INSERT, post.model_dump())
        return post

    async def create_post(self, fields: PostCreate, actor: Actor) -> Post:
        return await self._run(self._create_post, fields, actor)

    def _create_comment(self, post_id: str, fields: CommentCreate, actor: Actor) -> Comment:
        self._post_row(post_id)
        if fields.parent_id is not None:
            parent = self.db.get(ForumComment, fields.parent_id)
            if parent is None or parent.post_id != post_id:
                raise ReplyDepthError("Parent comment not found on this post")
            if parent.parent_id is not None:
                raise ReplyDepthError("Replies can only be made to top-level comments")

        row = ForumComment(
            post_id=post_id,
            parent_id=fields.parent_id,
            user_id=actor.user_id,
            content=fields.content.strip(),
            is_anonymous=fields.is_anonymous,
            likes_count=0,
        )
        self.db.add(row)
        # Only top-level comments count towards the post's comment total.
        if row.parent_id is None:
            self._bump(post_id, "comments_count", 1)
        self._commit()
        self.db.refresh(row)

        comment = Comment.model_validate(row)
        logger.info("Created comment %s on post %s", comment.id, post_id)
        self._publish(COMMENTS_TABLE, EventKind.INSERT, comment.model_dump())
        if comment.is_top_level:
            self._publish_post(post_id)
        return comment

    async def create_comment(self, post_id: str, fields: CommentCreate, actor: Actor) -> Comment:
        return await self._run(self._create_comment, post_id, fields, actor)

    def _update_post(self, post_id: str, fields: PostUpdate, actor: Actor) -> Post:
        row = self._owned_post_row(post_id, actor, "edit")
        for name, value in fields.changes().items():
            setattr(row, name, value)
        self._commit()
        return self._publish_post(post_id)

    async def update_post(self, post_id: str, fields: PostUpdate, actor: Actor) -> Post:
        """Apply ``fields`` to a post authored by ``actor``."""
        return await self._run(self._update_post, post_id, fields, actor)

    def _increment_counter(self, post_id: str, counter: Counter, delta: int) -> Post:
        self._post_row(post_id)
        self._bump(post_id, counter, delta)
        self._commit()
        return self._publish_post(post_id)

    async def increment_counter(self, post_id: str, counter: Counter, delta: int = 1) -> Post:
        """Atomically add ``delta`` to a post counter in the database.

        The addition happens inside the UPDATE statement, so concurrent
        callers cannot lose each other's increments. Counters never drop
        below zero.
        """
        return await self._run(self._increment_counter, post_id, counter, delta)

    def _delete_post(self, post_id: str, actor: Actor) -> None:
        row = self._owned_post_row(post_id, actor, "delete")
        comment_ids = self.db.scalars(
            select(ForumComment.id).where(ForumComment.post_id == post_id)
        ).all()
        self.db.delete(row)
        self._commit()

        logger.info("Deleted post %s with %d comment(s)", post_id, len(comment_ids))
        for comment_id in comment_ids:
            self._publish(COMMENTS_TABLE, EventKind.DELETE, {"id": comment_id, "post_id": post_id})
        self._publish(POSTS_TABLE, EventKind.DELETE, {"id": post_id})

    async def delete_post(self, post_id: str, actor: Actor) -> None:
        await self._run(self._delete_post, post_id, actor)

    def _delete_comment(self, comment_id: str, actor: Actor) -> None:
        row = self._comment_row(comment_id)
        if not actor.owns(row):
            raise PermissionDeniedError("You can only delete your own comments")
        post_id = row.post_id
        was_top_level = row.parent_id is None
        reply_ids = self.db.scalars(
            select(ForumComment.id).where(ForumComment.parent_id == comment_id)
        ).all()
        self.db.delete(row)
        if was_top_level:
            self._bump(post_id, "comments_count", -1)
        self._commit()

        for removed_id in [*reply_ids, comment_id]:
            self._publish(COMMENTS_TABLE, EventKind.DELETE, {"id": removed_id, "post_id": post_id})
        if was_top_level:
            self._publish_post(post_id)

    async def delete_comment(self, comment_id: str, actor: Actor) -> None:
        """Delete a comment authored by ``actor`` together with its replies."""
        await self._run(self._delete_comment, comment_id, actor)

    def subscribe(self, table: Table, handler: EventHandler) -> Subscription:
        return self.feed.subscribe(table, handler)
