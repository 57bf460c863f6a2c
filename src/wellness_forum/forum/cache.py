"""In-memory post and comment cache fed by fetches, actions and push events.

The cache is not authoritative. Every write goes through one rule: a record
replaces the cached copy with the same id only when its version stamp
(``updated_at``, else ``created_at``) is not older. That keeps a late fetch
or a reordered push event from rolling a record back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TypeVar

from pydantic import ValidationError

from wellness_forum.schemas.comment import Comment
from wellness_forum.schemas.events import COMMENTS_TABLE, POSTS_TABLE, ChangeEvent, EventKind
from wellness_forum.schemas.post import Post

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", Post, Comment)


def _is_not_older(incoming: Post | Comment, cached: Post | Comment) -> bool:
    return incoming.version_stamp >= cached.version_stamp


def _merge_snapshot(fetched: Iterable[RecordT], cached: Iterable[RecordT]) -> list[RecordT]:
    known = {record.id: record for record in cached}
    merged: list[RecordT] = []
    for record in fetched:
        current = known.get(record.id)
        if current is not None and not _is_not_older(record, current):
            merged.append(current)
        else:
            merged.append(record)
    return merged


class ForumCache:
    """Posts (newest first) and comment buckets keyed by post id."""

    def __init__(self) -> None:
        self._posts: list[Post] = []
        self._comments: dict[str, list[Comment]] = {}
        self.version = 0

    def _touch(self) -> None:
        self.version += 1

    # -- reads -------------------------------------------------------------

    @property
    def posts(self) -> tuple[Post, ...]:
        return tuple(self._posts)

    def get_post(self, post_id: str) -> Post | None:
        return next((p for p in self._posts if p.id == post_id), None)

    def has_comments(self, post_id: str) -> bool:
        """True once a comment bucket has been loaded for ``post_id``."""
        return post_id in self._comments

    def comments_for(self, post_id: str) -> tuple[Comment, ...]:
        return tuple(self._comments.get(post_id, ()))

    # -- wholesale replacement ----------------------------------------------

    def replace_posts(self, posts: Iterable[Post]) -> None:
        """Swap in a fresh fetch, keeping cached copies that are newer."""
        self._posts = _merge_snapshot(posts, self._posts)
        self._touch()

    def replace_comments(self, post_id: str, comments: Iterable[Comment]) -> None:
        """Swap in a fresh comment fetch for one post."""
        self._comments[post_id] = _merge_snapshot(comments, self._comments.get(post_id, ()))
        self._touch()

    # -- incremental patches ------------------------------------------------

    def upsert_post(self, post: Post, *, prepend: bool = True) -> bool:
        """Insert or replace ``post``; returns True when the cache changed."""
        for index, cached in enumerate(self._posts):
            if cached.id == post.id:
                if not _is_not_older(post, cached) or cached == post:
                    return False
                self._posts[index] = post
                self._touch()
                return True
        if prepend:
            self._posts.insert(0, post)
        else:
            self._posts.append(post)
        self._touch()
        return True

    def update_post(self, post: Post) -> bool:
        """Replace a cached post; unknown ids are ignored."""
        if self.get_post(post.id) is None:
            return False
        return self.upsert_post(post)

    def remove_post(self, post_id: str) -> bool:
        before = len(self._posts)
        self._posts = [p for p in self._posts if p.id != post_id]
        removed = len(self._posts) != before
        # The store cascades the post's comments away with it.
        if self._comments.pop(post_id, None) is not None:
            removed = True
        if removed:
            self._touch()
        return removed

    def upsert_comment(self, comment: Comment) -> bool:
        """Insert or replace ``comment`` in its post's bucket."""
        bucket = self._comments.setdefault(comment.post_id, [])
        for index, cached in enumerate(bucket):
            if cached.id == comment.id:
                if not _is_not_older(comment, cached) or cached == comment:
                    return False
                bucket[index] = comment
                self._touch()
                return True
        bucket.append(comment)
        self._touch()
        return True

    def update_comment(self, comment: Comment) -> bool:
        bucket = self._comments.get(comment.post_id, [])
        if not any(c.id == comment.id for c in bucket):
            return False
        return self.upsert_comment(comment)

    def remove_comment(self, comment_id: str, post_id: str | None = None) -> bool:
        buckets = (
            [post_id] if post_id is not None and post_id in self._comments
            else list(self._comments)
        )
        removed = False
        for key in buckets:
            bucket = self._comments[key]
            kept = [c for c in bucket if c.id != comment_id]
            if len(kept) != len(bucket):
                self._comments[key] = kept
                removed = True
        if removed:
            self._touch()
        return removed

    # -- push events ----------------------------------------------------------

    def apply(self, event: ChangeEvent) -> bool:
        """Merge one push event; applying the same event twice is a no-op.

        Returns True when the cache changed. Malformed records are logged and
        skipped.
        """
        try:
            if event.table == POSTS_TABLE:
                return self._apply_post_event(event)
            if event.table == COMMENTS_TABLE:
                return self._apply_comment_event(event)
        except ValidationError as exc:
            logger.warning("Dropping malformed %s %s event: %s", event.table, event.kind, exc)
            return False
        logger.debug("Ignoring event for unknown table %r", event.table)
        return False

    def _apply_post_event(self, event: ChangeEvent) -> bool:
        if event.kind is EventKind.DELETE:
            post_id = event.record.get("id")
            return post_id is not None and self.remove_post(str(post_id))

        post = Post.model_validate(event.record)
        if event.kind is EventKind.INSERT:
            return self.upsert_post(post, prepend=True)
        return self.update_post(post)

    def _apply_comment_event(self, event: ChangeEvent) -> bool:
        if event.kind is EventKind.DELETE:
            comment_id = event.record.get("id")
            if comment_id is None:
                return False
            post_id = event.record.get("post_id")
            return self.remove_comment(
                str(comment_id), str(post_id) if post_id is not None else None
            )

        comment = Comment.model_validate(event.record)
        if event.kind is EventKind.INSERT:
            # Unopened posts fetch their whole bucket later; a lone insert
            # here would mark the bucket as loaded.
            if not self.has_comments(comment.post_id):
                return False
            return self.upsert_comment(comment)
        return self.update_comment(comment)
