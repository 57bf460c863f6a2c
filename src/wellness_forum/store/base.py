"""Store capability consumed by the forum view-model, and its push channel."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Literal, Protocol

from wellness_forum.forum.actor import Actor
from wellness_forum.schemas.comment import Comment, CommentCreate
from wellness_forum.schemas.events import ChangeEvent, Table
from wellness_forum.schemas.post import Post, PostCreate, PostUpdate

logger = logging.getLogger(__name__)

Counter = Literal["likes_count", "comments_count"]
EventHandler = Callable[[ChangeEvent], None]


class Subscription:
    """Handle returned by ``subscribe``; call ``unsubscribe`` to stop delivery."""

    def __init__(self, feed: ChangeFeed, table: Table, handler: EventHandler) -> None:
        self._feed = feed
        self.table = table
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._feed._remove(self)
            self.active = False


class ChangeFeed:
    """In-process fan-out of change events to per-table subscribers."""

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[Subscription]] = {}

    def subscribe(self, table: Table, handler: EventHandler) -> Subscription:
        subscription = Subscription(self, table, handler)
        self._subscriptions.setdefault(table, []).append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        handlers = self._subscriptions.get(subscription.table, [])
        if subscription in handlers:
            handlers.remove(subscription)

    def subscriber_count(self, table: Table) -> int:
        return len(self._subscriptions.get(table, []))

    def publish(self, event: ChangeEvent) -> None:
        """Deliver ``event`` to every subscriber of its table.

        A subscriber that raises is logged and skipped; the others still
        receive the event.
        """
        for subscription in list(self._subscriptions.get(event.table, [])):
            try:
                subscription.handler(event)
            except Exception:
                logger.exception("Subscriber failed handling %s %s event", event.table, event.kind)


class ForumStore(Protocol):
    """Asynchronous record store behind the forum.

    Implementations return validated entities and raise ``StoreError``
    subclasses on failure. Mutations that take an ``actor`` raise
    ``PermissionDeniedError`` when the record belongs to someone else.
    """

    async def list_posts(
        self, order_by: str = "created_at", descending: bool = True
    ) -> list[Post]: ...

    async def list_comments(
        self, post_id: str, order_by: str = "created_at", descending: bool = False
    ) -> list[Comment]: ...

    async def get_post(self, post_id: str) -> Post: ...

    async def get_comment(self, comment_id: str) -> Comment: ...

    async def create_post(self, fields: PostCreate, actor: Actor) -> Post: ...

    async def create_comment(
        self, post_id: str, fields: CommentCreate, actor: Actor
    ) -> Comment: ...

    async def update_post(self, post_id: str, fields: PostUpdate, actor: Actor) -> Post: ...

    async def increment_counter(
        self, post_id: str, counter: Counter, delta: int = 1
    ) -> Post: ...

    async def delete_post(self, post_id: str, actor: Actor) -> None: ...

    async def delete_comment(self, comment_id: str, actor: Actor) -> None: ...

    def subscribe(self, table: Table, handler: EventHandler) -> Subscription: ...


class _ChangeFeedSingleton:
    """Singleton wrapper for the process-wide ChangeFeed."""

    _instance: ChangeFeed | None = None

    @classmethod
    def get_instance(cls) -> ChangeFeed:
        """Get or create the singleton ChangeFeed instance."""
        if cls._instance is None:
            cls._instance = ChangeFeed()
        return cls._instance


def get_change_feed() -> ChangeFeed:
    """Return the process-wide change feed."""
    return _ChangeFeedSingleton.get_instance()
