"""Filter, sort and paginate the post collection for display.

Everything here is a pure function of its arguments; the view-model decides
when to call it and caches the result.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum

from wellness_forum.core.settings import settings
from wellness_forum.schemas.post import Post

from .actor import Actor


class FilterMode(StrEnum):
    """Which subset of posts to show."""

    ALL = "all"
    MINE = "mine"
    ANONYMOUS = "anonymous"


class SortMode(StrEnum):
    """Display order of the filtered posts."""

    NEWEST = "newest"
    OLDEST = "oldest"
    MOST_LIKED = "most_liked"
    MOST_COMMENTED = "most_commented"


@dataclass(frozen=True, slots=True)
class PostPage:
    """A page of posts plus the numbers the pager needs."""

    posts: tuple[Post, ...]
    page: int
    total_pages: int
    total_count: int


def matches_query(post: Post, query: str) -> bool:
    """Case-insensitive substring match on title, content or any tag."""
    needle = query.strip().lower()
    if not needle:
        return True
    return (
        needle in post.title.lower()
        or needle in post.content.lower()
        or any(needle in tag.lower() for tag in post.tags)
    )


def filter_posts(
    posts: Iterable[Post],
    *,
    query: str = "",
    mode: FilterMode = FilterMode.ALL,
    actor: Actor | None = None,
) -> list[Post]:
    """Apply the free-text query AND the filter mode.

    ``mine`` without an actor yields nothing.
    """
    selected = [post for post in posts if matches_query(post, query)]

    if mode is FilterMode.MINE:
        if actor is None:
            return []
        return [post for post in selected if post.user_id == actor.user_id]
    if mode is FilterMode.ANONYMOUS:
        return [post for post in selected if post.is_anonymous]
    return selected


def sort_posts(posts: Iterable[Post], mode: SortMode = SortMode.NEWEST) -> list[Post]:
    """Return ``posts`` in a deterministic order for ``mode``.

    Creation time ties are broken by id; counter ties fall back to newest
    first, then id, so the comparator is a strict total order.
    """
    if mode is SortMode.OLDEST:
        return sorted(posts, key=lambda p: (p.created_at, p.id))
    if mode is SortMode.NEWEST:
        return sorted(posts, key=lambda p: (p.created_at, p.id), reverse=True)

    counter = "likes_count" if mode is SortMode.MOST_LIKED else "comments_count"
    return sorted(
        posts,
        key=lambda p: (getattr(p, counter), p.created_at, p.id),
        reverse=True,
    )


def total_pages(count: int, page_size: int) -> int:
    """Number of pages needed for ``count`` items; never less than one."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return max(1, math.ceil(count / page_size))


def clamp_page(page: int, pages: int) -> int:
    return min(max(1, page), pages)


def paginate(posts: Sequence[Post], page: int, page_size: int) -> PostPage:
    """Slice ``[(page-1)*size, page*size)`` out of ``posts``.

    The page index is clamped into ``[1, total_pages]``.
    """
    pages = total_pages(len(posts), page_size)
    current = clamp_page(page, pages)
    start = (current - 1) * page_size
    return PostPage(
        posts=tuple(posts[start:start + page_size]),
        page=current,
        total_pages=pages,
        total_count=len(posts),
    )


def build_page(
    posts: Iterable[Post],
    *,
    query: str = "",
    filter_mode: FilterMode = FilterMode.ALL,
    sort_mode: SortMode = SortMode.NEWEST,
    page: int = 1,
    page_size: int | None = None,
    actor: Actor | None = None,
) -> PostPage:
    """Run filter, sort and paginate in that order."""
    size = page_size if page_size is not None else settings.forum_page_size
    selected = filter_posts(posts, query=query, mode=filter_mode, actor=actor)
    ordered = sort_posts(selected, sort_mode)
    return paginate(ordered, page, size)


def page_window(current: int, total: int, width: int | None = None) -> list[int]:
    """Page numbers shown by the pager: up to ``width`` pages around ``current``.

    >>> page_window(1, 10)
    [1, 2, 3, 4, 5]
    >>> page_window(9, 10)
    [6, 7, 8, 9, 10]
    """
    width = width if width is not None else settings.forum_page_window
    if total < 1:
        return []
    current = clamp_page(current, total)
    start = max(1, min(total - width + 1, current - width // 2))
    return list(range(start, min(total, start + width - 1) + 1))
