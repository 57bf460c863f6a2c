"""Reply-tree construction for the comments of one post."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from wellness_forum.schemas.comment import Comment, CommentNode

from .errors import ReplyDepthError

logger = logging.getLogger(__name__)


def _by_creation(comments: Iterable[Comment]) -> list[Comment]:
    # sorted() is stable, so equal timestamps keep their input order.
    return sorted(comments, key=lambda c: c.created_at)


def build_comment_tree(comments: Sequence[Comment]) -> list[CommentNode]:
    """Group a flat comment list into top-level comments with direct replies.

    Only one level of nesting is materialized. A comment whose parent is not
    a top-level comment of the list (a reply to a reply, or an orphan) is
    left out of the tree.
    """
    top_level = _by_creation(c for c in comments if c.parent_id is None)
    top_ids = {c.id for c in top_level}

    replies: dict[str, list[Comment]] = {comment_id: [] for comment_id in top_ids}
    dropped = 0
    for comment in _by_creation(c for c in comments if c.parent_id is not None):
        bucket = replies.get(comment.parent_id)  # type: ignore[arg-type]
        if bucket is None:
            dropped += 1
            continue
        bucket.append(comment)

    if dropped:
        logger.debug("Left %d unthreaded comment(s) out of the reply tree", dropped)

    return [
        CommentNode(**comment.model_dump(), replies=replies[comment.id])
        for comment in top_level
    ]


def flatten_tree(tree: Iterable[CommentNode]) -> list[Comment]:
    """Inverse of ``build_comment_tree`` for the comments it kept."""
    flat: list[Comment] = []
    for node in tree:
        flat.append(Comment(**node.model_dump(exclude={"replies"})))
        flat.extend(node.replies)
    return flat


def ensure_reply_target(
    post_id: str,
    parent_id: str | None,
    comments: Iterable[Comment],
) -> None:
    """Check that a new comment may hang off ``parent_id``.

    Raises:
        ReplyDepthError: If the parent is unknown, belongs to another post,
            or is itself a reply.
    """
    if parent_id is None:
        return
    parent = next((c for c in comments if c.id == parent_id), None)
    if parent is None or parent.post_id != post_id:
        raise ReplyDepthError("Parent comment not found on this post")
    if parent.parent_id is not None:
        raise ReplyDepthError("Replies can only be made to top-level comments")
