"""Forum view-model: view state, derived pages and user actions.

The view-model owns a ``ForumCache`` and a ``ForumStore``. Reads are served
from the cache through the pure pipeline; actions validate locally, call the
store under a timeout and patch the cache only after the store confirms.
Every action returns an ``ActionResult`` and records a ``Notice`` the UI can
show and dismiss.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, TypeVar

from pydantic import ValidationError

from wellness_forum.core.settings import settings
from wellness_forum.schemas.comment import Comment, CommentCreate, CommentNode
from wellness_forum.schemas.events import COMMENTS_TABLE, POSTS_TABLE, ChangeEvent
from wellness_forum.schemas.post import Post, PostCreate, PostUpdate, parse_tags

from .actor import Actor
from .cache import ForumCache
from .errors import (
    ForumError,
    ForumValidationError,
    NotAuthenticatedError,
    PermissionDeniedError,
    RecordNotFoundError,
    StoreError,
    StoreTimeoutError,
)
from .pipeline import FilterMode, PostPage, SortMode, build_page, page_window
from .threads import build_comment_tree, ensure_reply_target

if TYPE_CHECKING:
    from wellness_forum.store.base import ForumStore, Subscription

logger = logging.getLogger(__name__)

T = TypeVar("T")

NoticeLevel = Literal["success", "error", "info"]


@dataclass(frozen=True, slots=True)
class Notice:
    """Transient, dismissible message for the UI."""

    level: NoticeLevel
    message: str


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Outcome of a user action."""

    ok: bool
    notice: Notice | None = None
    value: Any = None
    error: ForumError | None = None


@dataclass(slots=True)
class ViewState:
    query: str = ""
    filter_mode: FilterMode = FilterMode.ALL
    sort_mode: SortMode = SortMode.NEWEST
    page: int = 1
    selected_post_id: str | None = None


@dataclass(slots=True)
class _PageMemo:
    key: tuple = ()
    page: PostPage | None = None


class ForumViewModel:
    """State holder behind the community forum screen."""

    def __init__(
        self,
        store: ForumStore,
        actor: Actor | None = None,
        *,
        page_size: int | None = None,
        timeout: float | None = None,
        cache: ForumCache | None = None,
    ) -> None:
        self.store = store
        self.actor = actor
        self.page_size = page_size or settings.forum_page_size
        self.timeout = timeout if timeout is not None else settings.store_timeout_seconds
        self.cache = cache or ForumCache()
        self.state = ViewState()
        self.notices: list[Notice] = []
        self.is_loading = False
        self._memo = _PageMemo()
        self._subscriptions: list[Subscription] = []

    # -- store calls -------------------------------------------------------

    async def _call(self, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except TimeoutError as exc:
            raise StoreTimeoutError(f"Store did not answer within {self.timeout:g}s") from exc

    def _notify(self, level: NoticeLevel, message: str) -> Notice:
        notice = Notice(level, message)
        self.notices.append(notice)
        return notice

    def _fail(self, message: str, error: ForumError) -> ActionResult:
        return ActionResult(ok=False, notice=self._notify("error", message), error=error)

    def _succeed(self, message: str | None, value: Any = None) -> ActionResult:
        notice = self._notify("success", message) if message else None
        return ActionResult(ok=True, notice=notice, value=value)

    def dismiss_notice(self, notice: Notice) -> None:
        if notice in self.notices:
            self.notices.remove(notice)

    # -- view state --------------------------------------------------------

    def set_query(self, query: str) -> None:
        if query != self.state.query:
            self.state.query = query
            self.state.page = 1

    def set_filter(self, mode: FilterMode | str) -> None:
        mode = FilterMode(mode)
        if mode is not self.state.filter_mode:
            self.state.filter_mode = mode
            self.state.page = 1

    def set_sort(self, mode: SortMode | str) -> None:
        mode = SortMode(mode)
        if mode is not self.state.sort_mode:
            self.state.sort_mode = mode
            self.state.page = 1

    def set_page(self, page: int) -> None:
        self.state.page = min(max(1, page), self.current_page().total_pages)

    def next_page(self) -> None:
        self.set_page(self.state.page + 1)

    def previous_page(self) -> None:
        self.set_page(self.state.page - 1)

    @property
    def is_filtered(self) -> bool:
        """True when a query or non-default filter narrows the listing."""
        return bool(self.state.query.strip()) or self.state.filter_mode is not FilterMode.ALL

    # -- derived views -------------------------------------------------------

    def current_page(self) -> PostPage:
        """Page of posts for the current view state.

        The same object is returned until the cache or the view state changes.
        """
        key = (
            self.cache.version,
            self.state.query,
            self.state.filter_mode,
            self.state.sort_mode,
            self.state.page,
            self.page_size,
            self.actor.user_id if self.actor else None,
        )
        if self._memo.page is None or self._memo.key != key:
            self._memo.page = build_page(
                self.cache.posts,
                query=self.state.query,
                filter_mode=self.state.filter_mode,
                sort_mode=self.state.sort_mode,
                page=self.state.page,
                page_size=self.page_size,
                actor=self.actor,
            )
            self._memo.key = key
        return self._memo.page

    def pager(self) -> list[int]:
        page = self.current_page()
        return page_window(page.page, page.total_pages)

    def thread(self, post_id: str) -> list[CommentNode]:
        """Reply tree for one post, from whatever comments are cached."""
        return build_comment_tree(self.cache.comments_for(post_id))

    # -- loading -----------------------------------------------------------------

    async def load(self) -> ActionResult:
        """Fetch all posts, newest first, into the cache."""
        self.is_loading = True
        try:
            posts = await self._call(self.store.list_posts("created_at", descending=True))
        except StoreError as exc:
            logger.warning("Error fetching posts: %s", exc)
            return self._fail("Failed to load posts", exc)
        finally:
            self.is_loading = False
        self.cache.replace_posts(posts)
        return ActionResult(ok=True, value=posts)

    async def load_comments(self, post_id: str) -> ActionResult:
        try:
            comments = await self._call(
                self.store.list_comments(post_id, "created_at", descending=False)
            )
        except StoreError as exc:
            logger.warning("Error fetching comments for post %s: %s", post_id, exc)
            return self._fail("Failed to load comments", exc)
        self.cache.replace_comments(post_id, comments)
        return ActionResult(ok=True, value=comments)

    async def _refresh_post(self, post_id: str) -> None:
        try:
            post = await self._call(self.store.get_post(post_id))
        except StoreError as exc:
            logger.warning("Could not refresh post %s: %s", post_id, exc)
            return
        self.cache.update_post(post)

    async def select_post(self, post_id: str | None) -> ActionResult:
        """Open a post; its comments are fetched the first time only."""
        self.state.selected_post_id = post_id
        if post_id is None or self.cache.has_comments(post_id):
            return ActionResult(ok=True)
        return await self.load_comments(post_id)

    # -- realtime ----------------------------------------------------------------

    def handle_event(self, event: ChangeEvent) -> None:
        if self.cache.apply(event):
            logger.debug("Merged %s %s event", event.table, event.kind)

    def subscribe(self) -> None:
        """Start receiving push events for posts and comments."""
        if self._subscriptions:
            return
        self._subscriptions = [
            self.store.subscribe(POSTS_TABLE, self.handle_event),
            self.store.subscribe(COMMENTS_TABLE, self.handle_event),
        ]

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []

    # -- actions -----------------------------------------------------------------

    def _require_actor(self, action: str) -> Actor:
        if self.actor is None:
            raise NotAuthenticatedError(f"Sign in to {action}")
        return self.actor

    async def create_post(
        self,
        title: str,
        content: str,
        tags: str | Sequence[str] = "",
        is_anonymous: bool = False,
    ) -> ActionResult:
        """Create a post and put it at the front of the cache once stored."""
        try:
            actor = self._require_actor("create a post")
        except NotAuthenticatedError as exc:
            return self._fail("Please sign in to create a post", exc)

        if not title.strip() or not content.strip():
            return self._fail(
                "Please fill in all required fields",
                ForumValidationError("Title and content are required"),
            )
        try:
            fields = PostCreate(
                title=title,
                content=content,
                tags=parse_tags(tags if isinstance(tags, str) else list(tags)),
                is_anonymous=is_anonymous,
            )
        except ValidationError as exc:
            return self._fail("Please fill in all required fields", ForumValidationError(str(exc)))

        try:
            post = await self._call(self.store.create_post(fields, actor))
        except StoreError as exc:
            logger.warning("Error creating post: %s", exc)
            return self._fail("Failed to create post", exc)

        self.cache.upsert_post(post, prepend=True)
        return self._succeed("Post created successfully!", post)

    async def create_comment(
        self,
        post_id: str,
        content: str,
        parent_id: str | None = None,
        is_anonymous: bool = False,
    ) -> ActionResult:
        """Add a comment, or a reply when ``parent_id`` names a top-level comment."""
        try:
            actor = self._require_actor("comment")
        except NotAuthenticatedError as exc:
            return self._fail("Please sign in to comment", exc)

        if not content.strip():
            return self._fail("Please enter a comment", ForumValidationError("Comment is empty"))
        try:
            if parent_id is not None:
                if not self.cache.has_comments(post_id):
                    loaded = await self.load_comments(post_id)
                    if not loaded.ok:
                        return loaded
                ensure_reply_target(post_id, parent_id, self.cache.comments_for(post_id))
            fields = CommentCreate(content=content, parent_id=parent_id, is_anonymous=is_anonymous)
        except ForumValidationError as exc:
            return self._fail(str(exc), exc)
        except ValidationError as exc:
            return self._fail("Please enter a comment", ForumValidationError(str(exc)))

        try:
            comment = await self._call(self.store.create_comment(post_id, fields, actor))
        except ForumValidationError as exc:
            return self._fail(str(exc), exc)
        except StoreError as exc:
            logger.warning("Error creating comment on post %s: %s", post_id, exc)
            return self._fail("Failed to add comment", exc)

        if self.cache.has_comments(post_id):
            self.cache.upsert_comment(comment)
        else:
            await self.load_comments(post_id)

        # The store keeps comments_count; pick up its value for top-level comments.
        if comment.is_top_level:
            await self._refresh_post(post_id)

        return self._succeed("Reply added!" if parent_id else "Comment added!", comment)

    async def like_post(self, post_id: str) -> ActionResult:
        """Add one like; the cache takes the store's authoritative count."""
        try:
            self._require_actor("like posts")
        except NotAuthenticatedError as exc:
            return ActionResult(ok=False, error=exc)

        try:
            post = await self._call(self.store.increment_counter(post_id, "likes_count"))
        except StoreError as exc:
            logger.warning("Error liking post %s: %s", post_id, exc)
            return self._fail("Failed to like post", exc)

        self.cache.upsert_post(post, prepend=False)
        return self._succeed(None, post)

    async def edit_post(
        self,
        post_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
        tags: str | Sequence[str] | None = None,
        is_anonymous: bool | None = None,
    ) -> ActionResult:
        """Edit the actor's own post.

        Ownership is checked against the cached copy when there is one and
        always by the store.
        """
        try:
            actor = self._require_actor("edit posts")
            cached = self.cache.get_post(post_id)
            if cached is not None and not actor.owns(cached):
                raise PermissionDeniedError("You can only edit your own posts")
        except (NotAuthenticatedError, PermissionDeniedError) as exc:
            return self._fail(str(exc), exc)

        values: dict[str, Any] = {"title": title, "content": content, "is_anonymous": is_anonymous}
        if tags is not None:
            values["tags"] = parse_tags(tags if isinstance(tags, str) else list(tags))
        try:
            fields = PostUpdate(**{k: v for k, v in values.items() if v is not None})
        except ValidationError as exc:
            return self._fail("Please fill in all required fields", ForumValidationError(str(exc)))

        try:
            post = await self._call(self.store.update_post(post_id, fields, actor))
        except PermissionDeniedError as exc:
            return self._fail(str(exc), exc)
        except StoreError as exc:
            logger.warning("Error editing post %s: %s", post_id, exc)
            return self._fail("Failed to update post", exc)

        self.cache.upsert_post(post, prepend=False)
        return self._succeed("Post updated", post)

    async def delete_post(self, post_id: str) -> ActionResult:
        """Delete the actor's own post together with its cached comments."""
        try:
            actor = self._require_actor("delete posts")
            cached = self.cache.get_post(post_id)
            if cached is not None and not actor.owns(cached):
                raise PermissionDeniedError("You can only delete your own posts")
        except (NotAuthenticatedError, PermissionDeniedError) as exc:
            return self._fail(str(exc), exc)

        try:
            await self._call(self.store.delete_post(post_id, actor))
        except PermissionDeniedError as exc:
            return self._fail(str(exc), exc)
        except RecordNotFoundError:
            pass
        except StoreError as exc:
            logger.warning("Error deleting post %s: %s", post_id, exc)
            return self._fail("Failed to delete post", exc)

        self.cache.remove_post(post_id)
        if self.state.selected_post_id == post_id:
            self.state.selected_post_id = None
        return self._succeed("Post deleted")

    async def delete_comment(self, post_id: str, comment_id: str) -> ActionResult:
        """Delete the actor's own comment; its replies go with it."""
        try:
            actor = self._require_actor("delete comments")
            cached: Comment | None = next(
                (c for c in self.cache.comments_for(post_id) if c.id == comment_id), None
            )
            if cached is not None and not actor.owns(cached):
                raise PermissionDeniedError("You can only delete your own comments")
        except (NotAuthenticatedError, PermissionDeniedError) as exc:
            return self._fail(str(exc), exc)

        try:
            await self._call(self.store.delete_comment(comment_id, actor))
        except PermissionDeniedError as exc:
            return self._fail(str(exc), exc)
        except RecordNotFoundError:
            pass
        except StoreError as exc:
            logger.warning("Error deleting comment %s: %s", comment_id, exc)
            return self._fail("Failed to delete comment", exc)

        replies = [c.id for c in self.cache.comments_for(post_id) if c.parent_id == comment_id]
        for removed_id in [*replies, comment_id]:
            self.cache.remove_comment(removed_id, post_id)
        if cached is None or cached.is_top_level:
            await self._refresh_post(post_id)
        return self._succeed("Comment deleted")
