"""Record stores backing the forum."""

from .base import ChangeFeed, ForumStore, Subscription, get_change_feed
from .sql import SqlForumStore

__all__ = ["ChangeFeed", "ForumStore", "SqlForumStore", "Subscription", "get_change_feed"]
